"""HTTP client with a base URL, default headers, typed decoding, middlewares and retries."""

from __future__ import annotations

import dataclasses
import json
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

import requests

USER_AGENT = "CloudAvenueSDK/2.0"

logger = logging.getLogger(__name__)

# A response middleware signals failure by raising.
ResponseMiddleware = Callable[["HTTPClient", "Response"], None]
# Called with the response (None after a transport failure) and the error, if any.
RetryCondition = Callable[[Optional["Response"], Optional[BaseException]], bool]


def _decode(target: Any, document: Any) -> Any:
    """Build a ``target`` from a decoded JSON document."""
    from_dict = getattr(target, "from_dict", None)
    if callable(from_dict):
        return from_dict(document)
    return target(document)


def _encode(body: Any) -> Any:
    to_dict = getattr(body, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return dataclasses.asdict(body)
    return body


def _auto_parse_response(client: HTTPClient, response: Response) -> None:
    """Decode the body into the request's result type, or its error type on failure."""
    failed = response.is_error()
    target = response.request.error_type if failed else response.request.result_type
    if target is None or not response.body:
        return
    try:
        decoded = _decode(target, json.loads(response.body))
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        logger.debug("response body left undecoded: %s", exc)
        return
    if failed:
        response.error = decoded
    else:
        response.result = decoded


class HTTPClient:
    """Shared settings for requests: base URL, headers, error type and middlewares."""

    def __init__(
        self,
        base_url: str = "",
        *,
        headers: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.headers: dict[str, str] = dict(headers or {})
        self.error_type: Any = None
        self.debug = False
        self.response_middlewares: list[ResponseMiddleware] = [_auto_parse_response]
        self.session = session or requests.Session()

    def new_request(self) -> Request:
        """Start a request carrying this client's settings."""
        return Request(self)

    def add_response_middleware(self, middleware: ResponseMiddleware) -> None:
        """Run ``middleware`` on every response, after those already registered."""
        self.response_middlewares.append(middleware)

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")) or not self.base_url:
            return path
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")


class Request:
    """One HTTP call; configure its attributes, then call :meth:`execute`."""

    def __init__(self, client: HTTPClient) -> None:
        self.client = client
        self.method = ""
        self.url = ""
        self.headers: dict[str, str] = {}
        self.path_params: dict[str, str] = {}
        self.query_params: dict[str, str] = {}
        self.body: Any = None
        self.result_type: Any = None
        self.error_type: Any = client.error_type
        self.context: dict[str, Any] = {}
        self.retry_conditions: list[RetryCondition] = []
        self.retry_count = 0
        self.retry_wait_time = timedelta(milliseconds=100)
        self.retry_max_wait_time = timedelta(seconds=2)
        self.timeout: Optional[timedelta] = None
        self.attempt = 0

    def execute(self, method: str, path: str) -> Response:
        """Send the request, retrying while a retry condition asks for it."""
        self.method = method.upper()
        self.url = self.client._url(self._expand(path))
        response: Optional[Response] = None
        error: Optional[BaseException] = None
        for attempt in range(1, max(self.retry_count, 0) + 2):
            self.attempt = attempt
            response, error = self._attempt()
            if attempt > self.retry_count:
                break
            if not any(condition(response, error) for condition in self.retry_conditions):
                break
            time.sleep(self._wait_seconds())
        if error is not None:
            raise error
        assert response is not None
        return response

    def get(self, path: str) -> Response:
        return self.execute("GET", path)

    def post(self, path: str) -> Response:
        return self.execute("POST", path)

    def _expand(self, path: str) -> str:
        for name, value in self.path_params.items():
            path = path.replace("{" + name + "}", quote(value, safe="$&+=:@"))
        return path

    def _wait_seconds(self) -> float:
        wait = self.retry_wait_time
        if self.retry_max_wait_time > timedelta(0):
            wait = min(wait, self.retry_max_wait_time)
        return max(wait.total_seconds(), 0.0)

    def _attempt(self) -> tuple[Optional[Response], Optional[BaseException]]:
        try:
            response = self._send()
        except requests.RequestException as exc:
            return None, exc
        try:
            for middleware in list(self.client.response_middlewares):
                middleware(self.client, response)
        except Exception as exc:
            return response, exc
        return response, None

    def _send(self) -> Response:
        headers = {**self.client.headers, **self.headers}
        payload: dict[str, Any] = {}
        if self.body is not None:
            if isinstance(self.body, (bytes, str)):
                payload["data"] = self.body
            else:
                payload["json"] = _encode(self.body)
        timeout = None
        if self.timeout is not None and self.timeout > timedelta(0):
            timeout = self.timeout.total_seconds()
        if self.client.debug:
            logger.debug("%s %s params=%s", self.method, self.url, self.query_params)
        started = time.monotonic()
        raw = self.client.session.request(
            self.method,
            self.url,
            headers=headers,
            params=self.query_params or None,
            timeout=timeout,
            **payload,
        )
        duration = timedelta(seconds=time.monotonic() - started)
        if self.client.debug:
            logger.debug("%s %s -> %d in %s", self.method, self.url, raw.status_code, duration)
        return Response(
            request=self,
            status_code=raw.status_code,
            headers=raw.headers,
            body=raw.content,
            duration=duration,
        )


@dataclass
class Response:
    """An HTTP response with its decoded result or error."""

    request: Request
    status_code: int
    headers: Mapping[str, str]
    body: bytes
    duration: timedelta
    result: Any = None
    error: Any = None

    def is_error(self) -> bool:
        """Whether the status code is 400 or above."""
        return self.status_code > 399


def new_http_client() -> HTTPClient:
    """An HTTP client with the SDK's User-Agent header."""
    return HTTPClient(headers={"User-Agent": USER_AGENT})