"""Cloud Avenue consoles: sites, locations and service endpoints."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class Console(str, Enum):
    """Identifier of a Cloud Avenue console."""

    CONSOLE1 = "console1"
    CONSOLE2 = "console2"
    CONSOLE4 = "console4"
    CONSOLE5 = "console5"
    CONSOLE7 = "console7"
    CONSOLE8 = "console8"
    CONSOLE9 = "console9"

    def __str__(self) -> str:
        return self.value

    def services(self) -> Services:
        """The services of this console."""
        with _LOCK:
            return _SITES[self].services

    def site_name(self) -> str:
        with _LOCK:
            return _SITES[self].site_name

    def location_code(self) -> LocationCode:
        with _LOCK:
            return _SITES[self].location_code

    def site_id(self) -> Console:
        with _LOCK:
            return _SITES[self].site_id

    def api_vcd_endpoint(self) -> str:
        """Endpoint of the VMware Cloud Director API."""
        with _LOCK:
            return _SITES[self].services.api_vcd.endpoint

    def api_cerberus_endpoint(self) -> str:
        """Endpoint of the Cerberus API, empty when the console has none."""
        with _LOCK:
            return _SITES[self].services.api_cerberus.endpoint

    def override_endpoint(self, services: Services) -> None:
        """Replace every service endpoint of this console."""
        with _LOCK:
            _SITES[self] = replace(_SITES[self], services=services)


class LocationCode(str, Enum):
    VDR = "vdr"
    CHR = "chr"
    VDR_CHA = "vdr-cha"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Service:
    enabled: bool = False
    endpoint: str = ""


@dataclass(frozen=True)
class Services:
    ihm: Service = field(default_factory=Service)
    api_vcd: Service = field(default_factory=Service)
    api_cerberus: Service = field(default_factory=Service)
    s3: Service = field(default_factory=Service)
    vcda: Service = field(default_factory=Service)
    netbackup: Service = field(default_factory=Service)


@dataclass(frozen=True)
class _Site:
    site_name: str
    location_code: LocationCode
    site_id: Console
    organization_pattern: re.Pattern
    services: Services


def _pattern(expression: str) -> re.Pattern:
    return re.compile(expression, re.ASCII)


def _on(endpoint: str) -> Service:
    return Service(enabled=True, endpoint=endpoint)


_LOCK = threading.RLock()

_SITES: dict[Console, _Site] = {
    Console.CONSOLE1: _Site(
        site_name="Console Externe VDR",
        location_code=LocationCode.VDR,
        site_id=Console.CONSOLE1,
        organization_pattern=_pattern(r"cav01ev01ocb\d{7}"),
        services=Services(
            ihm=_on("https://console1.cloudavenue.orange-business.com"),
            api_vcd=_on("https://console1.cloudavenue.orange-business.com"),
            api_cerberus=_on("https://console1.cloudavenue.orange-business.com/api/customers"),
            s3=_on("https://s3console1.cloudavenue.orange-business.com"),
            netbackup=_on("https://backup1.cloudavenue.orange-business.com/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE2: _Site(
        site_name="Console Interne VDR",
        location_code=LocationCode.VDR,
        site_id=Console.CONSOLE2,
        organization_pattern=_pattern(r"cav01iv02ocb\d{7}"),
        services=Services(
            ihm=_on("https://console2.cloudavenue.orange-business.com"),
            api_vcd=_on("https://console2.cloudavenue.orange-business.com"),
            api_cerberus=_on("https://console2.cloudavenue.orange-business.com/api/customers"),
            s3=_on("https://s3console2.cloudavenue.orange-business.com"),
            netbackup=_on("https://backup2.cloudavenue.orange-business.com/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE4: _Site(
        site_name="Console Externe CHA",
        location_code=LocationCode.CHR,
        site_id=Console.CONSOLE4,
        organization_pattern=_pattern(r"cav02ev04ocb\d{7}"),
        services=Services(
            ihm=_on("https://console4.cloudavenue.orange-business.com"),
            api_vcd=_on("https://console4.cloudavenue.orange-business.com"),
            api_cerberus=_on("https://console4.cloudavenue.orange-business.com/api/customers"),
            netbackup=_on("https://backup4.cloudavenue.orange-business.com/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE5: _Site(
        site_name="Console Interne CHA",
        location_code=LocationCode.CHR,
        site_id=Console.CONSOLE5,
        organization_pattern=_pattern(r"cav02iv05ocb\d{7}"),
        services=Services(
            ihm=_on("https://console5.cloudavenue-cha.itn.intraorange"),
            api_vcd=_on("https://console5.cloudavenue-cha.itn.intraorange"),
            api_cerberus=_on("https://console5.cloudavenue-cha.itn.intraorange/api/customers"),
            netbackup=_on("https://backup5.cloudavenue-cha.itn.intraorange/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE7: _Site(
        site_name="Console specific VDR",
        location_code=LocationCode.VDR,
        site_id=Console.CONSOLE7,
        organization_pattern=_pattern(r"cav01iv07ocb\d{7}"),
        services=Services(
            ihm=_on("https://console7.cloudavenue-vdr.itn.intraorange"),
            api_vcd=_on("https://console7.cloudavenue-vdr.itn.intraorange"),
            netbackup=_on("https://backup7.cloudavenue-vdr.itn.intraorange/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE8: _Site(
        site_name="Console specific VDR",
        location_code=LocationCode.VDR,
        site_id=Console.CONSOLE8,
        organization_pattern=_pattern(r"cav01iv08ocb\d{7}"),
        services=Services(
            ihm=_on("https://console8.cloudavenue-vdr.itn.intraorange"),
            api_vcd=_on("https://console8.cloudavenue-vdr.itn.intraorange"),
            netbackup=_on("https://backup8.cloudavenue-vdr.itn.intraorange/NetBackupSelfService/Api"),
        ),
    ),
    Console.CONSOLE9: _Site(
        site_name="Console VCOD",
        location_code=LocationCode.VDR_CHA,
        site_id=Console.CONSOLE9,
        organization_pattern=_pattern(r"cav0[0-2]{1}vv09ocb\d{7}"),
        services=Services(
            ihm=_on("https://console9.cloudavenue.orange-business.com"),
            api_vcd=_on("https://console9.cloudavenue.orange-business.com"),
            netbackup=Service(
                enabled=False,
                endpoint="https://backup9.cloudavenue.orange-business.com/NetBackupSelfService/Api",
            ),
        ),
    ),
}


def find_by_organization_name(organization_name: str) -> Optional[Console]:
    """Return the console hosting ``organization_name``, or None if no console matches."""
    with _LOCK:
        for console, site in _SITES.items():
            if site.organization_pattern.fullmatch(organization_name):
                return console
    return None


def check_organization_name(organization_name: str) -> bool:
    """Whether ``organization_name`` belongs to a known console."""
    return find_by_organization_name(organization_name) is not None