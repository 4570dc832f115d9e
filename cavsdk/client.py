"""Entry point of the SDK.

A :class:`Client` is built for one organization. The organization name selects
the console, and the console gives every API family its endpoint. When a
credential is given, one sub-client per API family (VMware Cloud Director,
Cerberus) is created. All sub-clients share that single credential instance,
so authentication stays in one place. Each sub-client adds the credential's
headers to its requests and refreshes the token when it is not yet initialized.
"""

from __future__ import annotations

import logging
from typing import Optional

from .consoles import Console, Services, find_by_organization_name
from .endpoint import API_CAV, VERSION_V1, Endpoint, EndpointRequestOption, Method
from .errors import APIError, CavError
from .httpclient import HTTPClient, Request, Response, new_http_client
from .jobflow import new_job_middleware
from .subclients import (
    SUBCLIENTS,
    VMWARE_VCD_VERSION,
    Auth,
    JobsCapable,
    SubClient,
    SubClientName,
)

CONTEXT_KEY_CLIENT_NAME = "subclient.clientName"

logger = logging.getLogger(__name__)


def _request_session(
    http_client: HTTPClient, endpoint: Endpoint, *options: EndpointRequestOption
) -> Response:
    request = http_client.new_request()
    request.headers["Accept"] = f"application/json;version={VMWARE_VCD_VERSION}"
    for option in options:
        option(endpoint, request)
    return request.post(endpoint.path_template)


SESSION_ENDPOINT = Endpoint(
    api=API_CAV,
    version=VERSION_V1,
    name="SessionVmware",
    method=Method.POST,
    sub_client=SubClientName.VMWARE,
    path_template="/cloudapi/1.0.0/sessions",
    path_params=[],
    query_params=[],
    documentation_url=(
        "https://developer.broadcom.com/xapis/vmware-cloud-director-openapi/"
        "v38.1/cloudapi/1.0.0/sessions/post/"
    ),
    request_internal_func=_request_session,
).register()


class Client:
    """Client of the Cloud Avenue APIs for one organization."""

    def __init__(
        self,
        organization: str,
        *,
        services: Optional[Services] = None,
        credential: Optional[Auth] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        console = find_by_organization_name(organization)
        if console is None:
            raise ValueError("console not found")
        self.organization = organization
        self.console: Console = console
        self.http_client = http_client or new_http_client()

        if services is not None:
            console.override_endpoint(services)

        self._subclients: dict[SubClientName, SubClient] = {}
        if credential is not None:
            for name in (SubClientName.CERBERUS, SubClientName.VMWARE):
                logger.info("Setting console %s for client %s", console, name)
                self._subclients[name] = SUBCLIENTS[name](credential=credential, console=console)

    def _identify_client(self, name: str) -> SubClient:
        subclient = self._subclients.get(name)  # type: ignore[call-overload]
        if subclient is None:
            raise CavError(f"invalid client {name}")
        return subclient

    def new_request(self, endpoint: Endpoint) -> Request:
        """A request prepared by the sub-client that serves ``endpoint``.

        When the endpoint has job options, responses are followed until the job ends.
        """
        subclient = self._identify_client(endpoint.sub_client)
        http_client = subclient.new_http_client()

        if endpoint.job_options is not None:
            if not isinstance(subclient, JobsCapable):
                raise CavError(f"client {endpoint.sub_client} does not support job options")
            # Polling needs its own client, or the middleware would trigger itself.
            job_client = subclient.new_http_client()
            http_client.add_response_middleware(
                new_job_middleware(job_client, subclient, endpoint.job_options)
            )

        request = http_client.new_request()
        request.context[CONTEXT_KEY_CLIENT_NAME] = endpoint.sub_client
        return request

    def parse_api_error(self, action: str, resp: Optional[Response]) -> Optional[APIError]:
        """The API error carried by ``resp``, as read by the sub-client that sent it."""
        if resp is None:
            return None
        name = resp.request.context.get(CONTEXT_KEY_CLIENT_NAME)
        subclient = self._subclients.get(name) if name is not None else None
        if subclient is None:
            return APIError(
                status_code=resp.status_code,
                message="unknown client",
                duration=resp.duration,
                endpoint=resp.request.url,
            )
        return subclient.parse_api_error(action, resp)