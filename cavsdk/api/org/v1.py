"""Organization API, version 1."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ...client import Client
from ...endpoint import API_ORG, VERSION_V1, Endpoint, Method, PathParam, get_endpoint
from ...errors import ClientNotInitializedError
from ...request_options import with_path_param
from ...subclients import SubClientName

_URN_RFC2141 = re.compile(
    r"urn:(?!urn:)[A-Za-z0-9][A-Za-z0-9-]{0,31}:"
    r"(?:[A-Za-z0-9()+,\-.:=@;$_!*'/?#]|%[0-9A-Fa-f]{2})+",
    re.IGNORECASE,
)


def _validate_urn(value: str) -> None:
    if not _URN_RFC2141.fullmatch(value):
        raise ValueError(f"{value!r} is not a valid RFC 2141 URN")


def _text(document: Mapping[str, Any], key: str) -> str:
    value = document.get(key)
    return "" if value is None else str(value)


def _int(document: Mapping[str, Any], key: str) -> int:
    return int(document.get(key) or 0)


@dataclass
class _ManagedBy:
    id: str = ""
    name: str = ""


@dataclass
class OrgResponse:
    """Details of an organization."""

    can_manage_orgs: bool = False
    can_publish: bool = False
    catalog_count: int = 0
    description: str = ""
    disk_count: int = 0
    display_name: str = ""
    id: str = ""
    is_enabled: bool = False
    managed_by: _ManagedBy = field(default_factory=_ManagedBy)
    name: str = ""
    org_vdc_count: int = 0
    running_vm_count: int = 0
    user_count: int = 0
    vapp_count: int = 0

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> OrgResponse:
        managed_by = document.get("managedBy") or {}
        return cls(
            can_manage_orgs=bool(document.get("canManageOrgs", False)),
            can_publish=bool(document.get("canPublish", False)),
            catalog_count=_int(document, "catalogCount"),
            description=_text(document, "description"),
            disk_count=_int(document, "diskCount"),
            display_name=_text(document, "displayName"),
            id=_text(document, "id"),
            is_enabled=bool(document.get("isEnabled", False)),
            managed_by=_ManagedBy(id=_text(managed_by, "id"), name=_text(managed_by, "name")),
            name=_text(document, "name"),
            org_vdc_count=_int(document, "orgVdcCount"),
            running_vm_count=_int(document, "runningVmCount"),
            user_count=_int(document, "userCount"),
            vapp_count=_int(document, "vappCount"),
        )


GET_ORGANIZATION = Endpoint(
    api=API_ORG,
    version=VERSION_V1,
    name="GetOrganization",
    method=Method.GET,
    sub_client=SubClientName.VMWARE,
    path_template="/cloudapi/1.0.0/orgs/{orgUrn}",
    path_params=[
        PathParam(
            name="orgUrn",
            description="The organization URN (Uniform Resource Name) to identify the organization.",
            required=False,
            validator_func=_validate_urn,
        )
    ],
    query_params=[],
    documentation_url=(
        "https://developer.broadcom.com/xapis/vmware-cloud-director-openapi/"
        "v38.1/cloudapi/1.0.0/orgs/orgUrn/get/"
    ),
    body_response_type=OrgResponse,
).register()


class Org:
    """Organization operations."""

    def __init__(self, client: Optional[Client]) -> None:
        if client is None:
            raise ClientNotInitializedError()
        self._client = client

    def demo_request(self, org_id: str) -> OrgResponse:
        """Fetch the details of the organization ``org_id``."""
        endpoint = get_endpoint("GetOrganization", Method.GET, API_ORG, VERSION_V1)
        assert endpoint.request_func is not None and endpoint.path_params
        resp = endpoint.request_func(
            self._client,
            endpoint,
            with_path_param(endpoint.path_params[0], org_id),
        )
        api_error = self._client.parse_api_error("Get organization detail", resp)
        if api_error is not None:
            raise api_error
        return resp.result