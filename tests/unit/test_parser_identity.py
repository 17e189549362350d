"""Unit tests for napalm_easysmart.parser.identity."""

from __future__ import annotations

from napalm_easysmart.model.identity import DeviceIdentity, RawIdentity
from napalm_easysmart.parser.identity import parse_identity

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_ARRAY_PAGE = """<html><head><script>
var info_ds = new Array("TL-SG108E", "AA:BB:CC:00:11:22", "192.168.0.1",
    "255.255.255.0", "192.168.0.254", "1.0.0 Build 20191025 Rel.41390",
    "TL-SG108E 3.0");
</script></head><body></body></html>
"""

_BARE_ARRAY_PAGE = (
    "<html><script>var x = "
    '["SwitchA","AA:BB:CC:00:11:22","10.0.0.1","255.255.255.0","10.0.0.254","1.0.0","1.0"]'
    ";</script></html>"
)

_OBJECT_PAGE = """<html><script>
var info_ds = {
    descriStr:["Office Switch"],
    macStr:["50:C7:BF:01:02:03"],
    ipStr:["10.1.1.2"],
    netmaskStr:["255.255.0.0"],
    gatewayStr:["10.1.0.1"],
    firmwareStr:["1.0.2 Build 20160526 Rel.34615"],
    hardwareStr:["TL-SG105E 2.0"]
};
</script></html>
"""


# ---------------------------------------------------------------------------
# Array layout
# ---------------------------------------------------------------------------

class TestArrayLayout:
    def test_new_array_form(self) -> None:
        identity = parse_identity(_ARRAY_PAGE)
        assert isinstance(identity, DeviceIdentity)
        assert identity.description == "TL-SG108E"
        assert identity.mac_address == "AA:BB:CC:00:11:22"
        assert identity.ip_address == "192.168.0.1"
        assert identity.subnet_mask == "255.255.255.0"
        assert identity.gateway == "192.168.0.254"
        assert identity.firmware_version == "1.0.0 Build 20191025 Rel.41390"
        assert identity.hardware_version == "TL-SG108E 3.0"

    def test_bare_bracketed_literal(self) -> None:
        identity = parse_identity(_BARE_ARRAY_PAGE)
        assert identity == DeviceIdentity(
            description="SwitchA",
            mac_address="AA:BB:CC:00:11:22",
            ip_address="10.0.0.1",
            subnet_mask="255.255.255.0",
            gateway="10.0.0.254",
            firmware_version="1.0.0",
            hardware_version="1.0",
        )

    def test_single_quotes_and_padding(self) -> None:
        page = (
            "<script>var info_ds = new Array(' SW ', 'AA:BB:CC:00:11:22', '1.1.1.1', "
            "'255.0.0.0', '1.1.1.254', 'fw', 'hw');</script>"
        )
        identity = parse_identity(page)
        assert isinstance(identity, DeviceIdentity)
        assert identity.description == "SW"
        assert identity.hardware_version == "hw"

    def test_short_array_is_not_an_identity(self) -> None:
        page = '<script>var info_ds = new Array("a", "b", "c");</script>'
        assert isinstance(parse_identity(page), RawIdentity)


# ---------------------------------------------------------------------------
# Object layout
# ---------------------------------------------------------------------------

class TestObjectLayout:
    def test_all_keys(self) -> None:
        identity = parse_identity(_OBJECT_PAGE)
        assert isinstance(identity, DeviceIdentity)
        assert identity.description == "Office Switch"
        assert identity.mac_address == "50:C7:BF:01:02:03"
        assert identity.gateway == "10.1.0.1"
        assert identity.hardware_version == "TL-SG105E 2.0"

    def test_missing_keys_become_empty(self) -> None:
        page = '<script>var info_ds = { descriStr:["Lab"], ipStr:["10.0.0.9"] };</script>'
        identity = parse_identity(page)
        assert isinstance(identity, DeviceIdentity)
        assert identity.description == "Lab"
        assert identity.ip_address == "10.0.0.9"
        assert identity.mac_address == ""
        assert identity.firmware_version == ""


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

class TestFallback:
    def test_unknown_page_returned_verbatim(self) -> None:
        body = "<html><body>Something else entirely</body></html>"
        identity = parse_identity(body)
        assert identity == RawIdentity(body=body)

    def test_empty_body(self) -> None:
        assert parse_identity("") == RawIdentity(body="")
