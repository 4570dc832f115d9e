from dataclasses import replace

import pytest

from cavsdk.consoles import (
    Console,
    LocationCode,
    Service,
    check_organization_name,
    find_by_organization_name,
)


@pytest.mark.parametrize(
    "org, console",
    [
        ("cav01ev01ocb0001234", Console.CONSOLE1),
        ("cav01iv02ocb0001234", Console.CONSOLE2),
        ("cav02ev04ocb0001234", Console.CONSOLE4),
        ("cav02iv05ocb0001234", Console.CONSOLE5),
        ("cav01iv07ocb0001234", Console.CONSOLE7),
        ("cav01iv08ocb0001234", Console.CONSOLE8),
        ("cav00vv09ocb0001234", Console.CONSOLE9),
    ],
)
def test_find_by_organization_name(org, console):
    found = find_by_organization_name(org)
    assert found is console
    assert found.site_id() is console
    assert check_organization_name(org) is True


@pytest.mark.parametrize("org", ["", "cav10ev01ocb0001234"])
def test_find_by_organization_name_unknown(org):
    assert find_by_organization_name(org) is None


def test_console_services():
    services = Console.CONSOLE1.services()
    assert services.api_vcd.enabled is True
    assert services.api_vcd.endpoint == "https://console1.cloudavenue.orange-business.com"


def test_console9_netbackup_disabled():
    assert Console.CONSOLE9.services().netbackup.enabled is False


def test_site_name():
    assert Console.CONSOLE4.site_name() == "Console Externe CHA"


def test_location_code():
    assert Console.CONSOLE5.location_code() is LocationCode.CHR
    assert Console.CONSOLE9.location_code() is LocationCode.VDR_CHA


@pytest.mark.parametrize(
    "console, expected",
    [
        (Console.CONSOLE1, "https://console1.cloudavenue.orange-business.com"),
        (Console.CONSOLE5, "https://console5.cloudavenue-cha.itn.intraorange"),
        (Console.CONSOLE9, "https://console9.cloudavenue.orange-business.com"),
    ],
)
def test_api_vcd_endpoint(console, expected):
    assert console.api_vcd_endpoint() == expected


@pytest.mark.parametrize(
    "console, expected",
    [
        (Console.CONSOLE1, "https://console1.cloudavenue.orange-business.com/api/customers"),
        (Console.CONSOLE2, "https://console2.cloudavenue.orange-business.com/api/customers"),
        (Console.CONSOLE4, "https://console4.cloudavenue.orange-business.com/api/customers"),
        (Console.CONSOLE5, "https://console5.cloudavenue-cha.itn.intraorange/api/customers"),
        (Console.CONSOLE7, ""),
        (Console.CONSOLE8, ""),
        (Console.CONSOLE9, ""),
    ],
)
def test_api_cerberus_endpoint(console, expected):
    assert console.api_cerberus_endpoint() == expected


@pytest.mark.parametrize(
    "org, expected",
    [
        ("cav01ev01ocb1234567", True),
        ("cav01iv02ocb7654321", True),
        ("cav02ev04ocb0000001", True),
        ("cav02iv05ocb9999999", True),
        ("cav01iv07ocb1234567", True),
        ("cav01iv08ocb7654321", True),
        ("cav00vv09ocb1234567", True),
        ("cav01vv09ocb7654321", True),
        ("cav02vv09ocb0000001", True),
        ("cav10ev01ocb1234567", False),
        ("", False),
        ("cav01ev01ocb1234", False),
        ("foobar", False),
        ("cav01ev01ocb1234567\n", False),
    ],
)
def test_check_organization_name(org, expected):
    assert check_organization_name(org) is expected


def test_override_endpoint():
    original = Console.CONSOLE1.services()
    updated = replace(
        original,
        api_vcd=Service(enabled=False, endpoint="https://custom-endpoint.example.com/cloudapi"),
    )
    try:
        Console.CONSOLE1.override_endpoint(updated)
        got = Console.CONSOLE1.services()
        assert got.api_vcd.endpoint == "https://custom-endpoint.example.com/cloudapi"
        assert got.api_vcd.enabled is False
        assert Console.CONSOLE1.api_vcd_endpoint() == "https://custom-endpoint.example.com/cloudapi"
        assert Console.CONSOLE2.api_vcd_endpoint() == "https://console2.cloudavenue.orange-business.com"
    finally:
        Console.CONSOLE1.override_endpoint(original)
    assert Console.CONSOLE1.services() == original


def test_console_str_is_value():
    found = find_by_organization_name("cav01iv07ocb1234567")
    assert str(found) == "console7"