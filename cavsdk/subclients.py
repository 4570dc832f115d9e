"""Sub-clients: one per Cloud Avenue API family, all sharing one credential."""

from __future__ import annotations

import logging
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .consoles import Console
from .endpoint import (
    API_CAV,
    VERSION_V1,
    Endpoint,
    EndpointRequestOption,
    Method,
    PathParam,
    get_endpoint,
)
from .errors import APIError, CavError, ClientNotInitializedError
from .httpclient import HTTPClient, Response, new_http_client
from .jobs import Job, JobStatus
from .request_options import override_set_result, set_custom_option, with_path_param

VMWARE_VCD_VERSION = "38.1"
CERBERUS_VCD_VERSION = VMWARE_VCD_VERSION

logger = logging.getLogger(__name__)

_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

_JOB_STATUSES = {
    "queued": JobStatus.QUEUED,
    "preRunning": JobStatus.RUNNING,
    "running": JobStatus.RUNNING,
    "success": JobStatus.SUCCESS,
    "error": JobStatus.ERROR,
    "aborted": JobStatus.ABORTED,
}


@runtime_checkable
class Auth(Protocol):
    """Authentication shared by the sub-clients."""

    def headers(self) -> Mapping[str, str]:
        """Headers to add to every HTTP request."""
        ...

    def refresh(self) -> None:
        """Obtain a fresh authentication token."""
        ...

    def is_initialized(self) -> bool:
        """Whether a token is already available."""
        ...


class SubClientName(str, Enum):
    VMWARE = "vmware"
    CERBERUS = "cerberus"
    NETBACKUP = "netbackup"

    def __str__(self) -> str:
        return self.value


def _text(document: Mapping[str, Any], key: str) -> str:
    value = document.get(key)
    return "" if value is None else str(value)


@dataclass
class VmwareError:
    """Error body returned by VMware Cloud Director."""

    message: str = ""
    status_code: int = 0
    status_message: str = ""

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> VmwareError:
        return cls(
            message=_text(document, "message"),
            status_code=int(document.get("majorErrorCode", 0) or 0),
            status_message=_text(document, "minorErrorCode"),
        )


@dataclass
class CerberusError:
    """Error body returned by the Cerberus API."""

    code: str = ""
    reason: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> CerberusError:
        return cls(
            code=_text(document, "code"),
            reason=_text(document, "reason"),
            message=_text(document, "message"),
        )


@dataclass
class VmwareJobAPIResponse:
    """An asynchronous operation (task) of VMware Cloud Director."""

    href: str = ""
    id: str = ""
    operation_key: str = ""
    name: str = ""
    status: str = ""
    operation: str = ""
    operation_name: str = ""
    service_namespace: str = ""
    start_time: str = ""
    end_time: str = ""
    expiry_time: str = ""
    cancel_requested: bool = False
    description: str = ""
    error: Optional[VmwareError] = None
    progress: int = 0
    details: str = ""

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> VmwareJobAPIResponse:
        error = document.get("error")
        return cls(
            href=_text(document, "href"),
            id=_text(document, "id"),
            operation_key=_text(document, "operationKey"),
            name=_text(document, "name"),
            status=_text(document, "status"),
            operation=_text(document, "operation"),
            operation_name=_text(document, "operationName"),
            service_namespace=_text(document, "serviceNamespace"),
            start_time=_text(document, "startTime"),
            end_time=_text(document, "endTime"),
            expiry_time=_text(document, "expiryTime"),
            cancel_requested=bool(document.get("cancelRequested", False)),
            description=_text(document, "description"),
            error=None if error is None else VmwareError.from_dict(error),
            progress=int(document.get("progress", 0) or 0),
            details=_text(document, "details"),
        )


@runtime_checkable
class JobsCapable(Protocol):
    """A sub-client able to follow asynchronous jobs."""

    def job_refresh(
        self,
        http_client: HTTPClient,
        resp: Response,
        request_options: Sequence[EndpointRequestOption],
    ) -> Job: ...

    def job_parser(self, resp: Optional[Response]) -> Job: ...

    def job_status_parser(self, status: str) -> JobStatus: ...


class SubClient(ABC):
    """Talks to one API family of a console with the shared credential."""

    error_type: ClassVar[type]

    def __init__(
        self, credential: Optional[Auth] = None, console: Optional[Console] = None
    ) -> None:
        self.credential = credential
        self.console = console
        self.http_client: Optional[HTTPClient] = None

    @abstractmethod
    def _base_url(self, console: Console) -> str: ...

    @abstractmethod
    def _error_message(self, error: Any) -> str: ...

    def new_http_client(self) -> HTTPClient:
        """An HTTP client for this API, authenticated, refreshing the credential if needed."""
        if self.console is None or self.credential is None:
            raise ClientNotInitializedError(
                f"{type(self).__name__} needs a console and a credential"
            )
        client = new_http_client()
        client.base_url = self._base_url(self.console)
        client.headers["Accept"] = f"application/json;version={VMWARE_VCD_VERSION}"
        client.error_type = self.error_type
        if not self.credential.is_initialized():
            self.credential.refresh()
        client.headers.update(self.credential.headers())
        self.http_client = client
        return client

    def parse_api_error(self, operation: str, resp: Optional[Response]) -> Optional[APIError]:
        """The API error carried by ``resp``, or None when the call succeeded."""
        if resp is None or not resp.is_error():
            return None
        if isinstance(resp.error, self.error_type):
            message = self._error_message(resp.error)
        else:
            message = "Unknown error occurred"
        return APIError(
            operation=operation,
            status_code=resp.status_code,
            message=message,
            duration=resp.duration,
            endpoint=resp.request.url,
        )


class CerberusClient(SubClient):
    """Sub-client of the Cerberus customer API."""

    error_type = CerberusError

    def _base_url(self, console: Console) -> str:
        return console.api_cerberus_endpoint()

    def _error_message(self, error: CerberusError) -> str:
        return f"{error.reason}: {error.message}"


def _extract_uuid(value: str) -> str:
    match = _UUID_PATTERN.search(value)
    return match.group(0) if match else ""


def _validate_uuid4(value: str) -> None:
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        raise ValueError(f"{value!r} is not a valid UUID v4") from None
    if parsed.version != 4 or str(parsed) != value.lower():
        raise ValueError(f"{value!r} is not a valid UUID v4")


def _request_job(
    http_client: HTTPClient, endpoint: Endpoint, *options: EndpointRequestOption
) -> Response:
    request = http_client.new_request()
    request.headers["Accept"] = f"application/*+json;version={VMWARE_VCD_VERSION}"
    for option in options:
        option(endpoint, request)
    return request.get(endpoint.path_template)


class VmwareClient(SubClient):
    """Sub-client of VMware Cloud Director, able to follow its tasks."""

    error_type = VmwareError

    def _base_url(self, console: Console) -> str:
        return console.api_vcd_endpoint()

    def _error_message(self, error: VmwareError) -> str:
        return error.message

    def job_refresh(
        self,
        http_client: HTTPClient,
        resp: Response,
        request_options: Sequence[EndpointRequestOption],
    ) -> Job:
        """Fetch the task behind ``resp`` again and return its parsed state."""
        job = self.job_parser(resp)
        try:
            endpoint = get_endpoint("JobVmware", Method.GET, API_CAV, VERSION_V1)
        except LookupError as exc:
            raise CavError(f"failed to get endpoint for JobVmware: {exc}") from exc
        if endpoint.request_internal_func is None or not endpoint.path_params:
            raise CavError("failed to get endpoint for JobVmware: endpoint is incomplete")

        context = dict(resp.request.context)
        options = [
            set_custom_option(lambda request: request.context.update(context)),
            *request_options,
            set_custom_option(lambda request: setattr(request, "error_type", VmwareError)),
            with_path_param(endpoint.path_params[0], _extract_uuid(job.id)),
            override_set_result(VmwareJobAPIResponse),
        ]
        try:
            refreshed = endpoint.request_internal_func(http_client, endpoint, *options)
        except Exception as exc:
            raise CavError(f"failed to refresh job status: {exc}") from exc
        return self.job_parser(refreshed)

    def job_parser(self, resp: Optional[Response]) -> Job:
        """Read a job from a response: its Location header or its task body."""
        if resp is None:
            raise CavError("no response to parse")

        href = resp.headers.get("Location")
        if href:
            return Job(id=href.split("/")[-1])

        result = resp.result
        if isinstance(result, VmwareJobAPIResponse) and result.status:
            try:
                status = self.job_status_parser(result.status)
            except ValueError as exc:
                raise CavError(f"failed to parse vmware job status: {exc}") from exc
            job = Job(
                id=result.id,
                name=result.name,
                description=result.description,
                href=result.href,
                status=status,
            )
            if result.error is not None:
                raise APIError(
                    status_code=result.error.status_code,
                    status_message=result.error.status_message,
                    operation=result.operation,
                    message=result.error.message,
                    duration=resp.duration,
                    endpoint=result.href,
                )
            return job

        api_error = self.parse_api_error("JobParser", resp)
        if api_error is not None:
            raise api_error
        raise CavError("failed to parse vmware job response, unexpected type or empty response")

    def job_status_parser(self, status: str) -> JobStatus:
        """Map a task status to a job status; ``preRunning`` counts as running."""
        try:
            return _JOB_STATUSES[status]
        except KeyError:
            raise ValueError(f"unknown job status: {status}") from None


SUBCLIENTS: dict[SubClientName, type[SubClient]] = {
    SubClientName.VMWARE: VmwareClient,
    SubClientName.CERBERUS: CerberusClient,
}


JOB_ENDPOINT = Endpoint(
    api=API_CAV,
    version=VERSION_V1,
    name="JobVmware",
    method=Method.GET,
    sub_client=SubClientName.VMWARE,
    documentation_url=(
        "https://developer.broadcom.com/xapis/vmware-cloud-director-api/38.1/doc/types/TaskType.html"
    ),
    path_template="/api/task/{taskId}",
    path_params=[
        PathParam(
            name="taskId",
            description="The identifier of the task to retrieve.",
            required=True,
            validator_func=_validate_uuid4,
        )
    ],
    query_params=[],
    request_internal_func=_request_job,
    body_response_type=VmwareJobAPIResponse,
).register()