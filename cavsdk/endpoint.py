"""API endpoints: their description, a process-wide registry and the default request flow."""

from __future__ import annotations

import hashlib
import inspect
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol
from urllib.parse import urlparse

from .httpclient import HTTPClient, Request, Response
from .jobs import ExtractorFunc, Job, JobOptions

API_ORG = "org"
API_CAV = "cav"

VERSION_V1 = "v1"
VERSION_V2 = "v2"

_PACKAGE = __name__.partition(".")[0]


class Method(str, Enum):
    """HTTP method of an endpoint."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    def __str__(self) -> str:
        return self.value


@dataclass
class PathParam:
    """A placeholder of the path template, e.g. ``{gatewayId}``."""

    name: str
    description: str = ""
    required: bool = False
    # Raises when the value is not acceptable.
    validator_func: Optional[Callable[[str], None]] = None


@dataclass
class QueryParam:
    """A query parameter the endpoint accepts."""

    name: str
    description: str = ""
    required: bool = False
    validator_func: Optional[Callable[[str], None]] = None


class _RequestFactory(Protocol):
    def new_request(self, endpoint: Endpoint) -> Request: ...


# An option adjusts a request for an endpoint and raises when it cannot.
EndpointRequestOption = Callable[["Endpoint", Request], None]
RequestFunc = Callable[..., Response]
InternalRequestFunc = Callable[..., Response]


@dataclass(kw_only=True)
class Endpoint:
    """Description of one API operation."""

    api: str = ""
    version: str = ""
    name: str = ""
    sub_client: str = ""
    method: Optional[Method] = None
    path_template: str = ""
    path_params: Optional[list[PathParam]] = None
    query_params: Optional[list[QueryParam]] = None
    documentation_url: str = ""
    body_request_type: Any = None
    # Setting Job here makes the request wait for the job to finish.
    body_response_type: Any = None
    request_func: Optional[RequestFunc] = None
    request_internal_func: Optional[InternalRequestFunc] = None
    job_options: Optional[JobOptions] = None

    def __post_init__(self) -> None:
        if isinstance(self.method, str) and not isinstance(self.method, Method):
            try:
                self.method = Method(self.method)
            except ValueError:
                pass

    def __str__(self) -> str:
        method = "" if self.method is None else str(self.method)
        return f"[{self.api}] {self.version} {self.name} {method} {self.path_template}"

    def register(self) -> Endpoint:
        """Validate this endpoint and add it to the registry.

        API and version default to those of the calling module
        (``<package>.api.<api>.<version>``).
        """
        self._validate()
        if not self.api or not self.version:
            api, version = decode_caller_module_name(_caller_module_name())
            self.api = self.api or api
            self.version = self.version or version
        if not self.api or not self.version:
            raise ValueError("unable to determine API and version from caller context.")
        _registry.add(self)
        return self

    def set_job_extractor_func(self, extractor_func: ExtractorFunc) -> None:
        """Attach an extractor to the job options, creating default options if needed."""
        if self.job_options is None:
            self.job_options = JobOptions()
        self.job_options.extractor_func = extractor_func

    def _validate(self) -> None:
        required = (
            ("name", self.name),
            ("sub_client", self.sub_client),
            ("path_template", self.path_template),
            ("documentation_url", self.documentation_url),
        )
        missing = [label for label, value in required if not value]
        if missing:
            raise ValueError(f"endpoint is missing required fields: {', '.join(missing)}")
        if not isinstance(self.method, Method):
            allowed = " ".join(m.value for m in Method)
            raise ValueError(f"endpoint method must be one of {allowed}, got {self.method!r}")
        parsed = urlparse(self.documentation_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"endpoint documentation_url is not a URL: {self.documentation_url!r}")
        for param in [*(self.path_params or []), *(self.query_params or [])]:
            if not param.name or not param.description:
                raise ValueError(f"parameter {param.name!r} needs a name and a description")


def _returns_job(response_type: Any) -> bool:
    if isinstance(response_type, type):
        return issubclass(response_type, Job)
    return isinstance(response_type, Job)


class _Registry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._endpoints: dict[str, Endpoint] = {}

    def add(self, endpoint: Endpoint) -> None:
        with self._lock:
            if endpoint.request_func is None:
                endpoint.request_func = (
                    default_request_func_with_job
                    if _returns_job(endpoint.body_response_type)
                    else default_request_func
                )
            key = encode_endpoint(endpoint.api, endpoint.version, endpoint.name, endpoint.method)
            self._endpoints[key] = endpoint

    def all(self) -> list[Endpoint]:
        with self._lock:
            return list(self._endpoints.values())

    def find(self, key: str) -> Optional[Endpoint]:
        with self._lock:
            return self._endpoints.get(key)


_registry = _Registry()


def _caller_module_name() -> str:
    """Name of the module that called the function calling this helper."""
    frame = inspect.currentframe()
    try:
        for _ in range(2):
            if frame is None:
                return ""
            frame = frame.f_back
        if frame is None:
            return ""
        module = inspect.getmodule(frame)
        return module.__name__ if module is not None else ""
    finally:
        del frame


def encode_endpoint(api: str, version: str, name: str, method: Any) -> str:
    """Registry key of an endpoint: the sha256 hex digest of ``api/version/name/method``."""
    text = "/".join((str(api), str(version), str(name), str(method)))
    return hashlib.sha256(text.encode()).hexdigest()


def decode_caller_module_name(module_name: str) -> tuple[str, str]:
    """Derive (api, version) from a module name; empty strings when it has none."""
    if module_name != _PACKAGE and not module_name.startswith(_PACKAGE + "."):
        return "", ""
    relative = module_name[len(_PACKAGE) + 1:]
    if relative == "api" or relative.startswith("api."):
        parts = relative.split(".", 2)
        if len(parts) == 3 and parts[1] and parts[2]:
            return parts[1], parts[2]
        return "", ""
    return API_CAV, VERSION_V1


def get_endpoints_uncategorized() -> list[Endpoint]:
    """Every registered endpoint."""
    return _registry.all()


def get_endpoint(
    name: str,
    method: Any,
    api: Optional[str] = None,
    version: Optional[str] = None,
) -> Endpoint:
    """Look up a registered endpoint.

    Without an explicit API and version they come from the calling module.
    """
    if not api or not version:
        api, version = decode_caller_module_name(_caller_module_name())
        if not api or not version:
            raise ValueError(
                "unable to determine API and version from caller context, "
                "pass api and version explicitly"
            )
    endpoint = _registry.find(encode_endpoint(api, version, name, method))
    if endpoint is None:
        raise LookupError(
            f"method {method} not found for name {name} in version {version} of api {api}"
        )
    return endpoint


def default_request_func(
    client: _RequestFactory, endpoint: Endpoint, *options: EndpointRequestOption
) -> Response:
    """Build the request through ``client``, apply ``options`` and send it."""
    request = client.new_request(endpoint)
    request.result_type = endpoint.body_response_type
    for option in options:
        option(endpoint, request)
    return request.execute(str(endpoint.method), endpoint.path_template)


def default_request_func_with_job(
    client: _RequestFactory, endpoint: Endpoint, *options: EndpointRequestOption
) -> Response:
    """Like :func:`default_request_func`, making sure the endpoint has job options."""
    if endpoint.job_options is None:
        endpoint.job_options = JobOptions()
    return default_request_func(client, endpoint, *options)


__all__ = [
    "API_CAV",
    "API_ORG",
    "VERSION_V1",
    "VERSION_V2",
    "Endpoint",
    "EndpointRequestOption",
    "HTTPClient",
    "Method",
    "PathParam",
    "QueryParam",
    "decode_caller_module_name",
    "default_request_func",
    "default_request_func_with_job",
    "encode_endpoint",
    "get_endpoint",
    "get_endpoints_uncategorized",
]