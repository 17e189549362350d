"""Unit tests for port and system form payloads.

The :mod:`responses` library intercepts HTTP calls, so the exact form
fields sent to the switch can be checked without a device.
"""

from __future__ import annotations

from urllib.parse import parse_qsl

import pytest
import responses as responses_lib

from napalm_easysmart.client.errors import EasySmartResponseError, EasySmartValidationError
from napalm_easysmart.client.port_ops import build_port_payload, set_port_config
from napalm_easysmart.client.session import EasySmartCredentials, EasySmartSession
from napalm_easysmart.client.system_ops import (
    factory_reset,
    reboot,
    save_config,
    set_led,
    set_system_name,
)
from napalm_easysmart.model.port import PortSpeed

_BASE = "http://192.168.0.1"


def _session() -> EasySmartSession:
    return EasySmartSession(EasySmartCredentials("192.168.0.1", "admin", "admin"))


def _form(index: int = 0) -> dict[str, str]:
    return dict(parse_qsl(responses_lib.calls[index].request.body))


# ---------------------------------------------------------------------------
# set_port_config
# ---------------------------------------------------------------------------

class TestSetPortConfig:
    @responses_lib.activate
    def test_enable_port_defaults(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/port_setting.cgi", body="<html/>")
        set_port_config(_session(), 3, True)
        assert _form() == {
            "portid": "3^",
            "state": "1^",
            "speed": "1^",
            "flowcontrol": "0^",
            "apply": "Apply",
        }

    @responses_lib.activate
    def test_disable_with_speed_and_flow_control(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/port_setting.cgi", body="<html/>")
        set_port_config(_session(), 8, False, speed=PortSpeed.M100_FULL, flow_control=True)
        form = _form()
        assert form["portid"] == "8^"
        assert form["state"] == "0^"
        assert form["speed"] == "5^"
        assert form["flowcontrol"] == "1^"

    @responses_lib.activate
    def test_http_error_propagates(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/port_setting.cgi", status=500)
        with pytest.raises(EasySmartResponseError):
            set_port_config(_session(), 1, True)

    @pytest.mark.parametrize("port", [0, 49, -1])
    def test_invalid_port_rejected_before_request(self, port: int) -> None:
        with pytest.raises(EasySmartValidationError):
            build_port_payload(port, True)

    @pytest.mark.parametrize("speed", [0, 7, -1])
    def test_invalid_speed_rejected(self, speed: int) -> None:
        with pytest.raises(EasySmartValidationError):
            build_port_payload(1, True, speed=speed)


# ---------------------------------------------------------------------------
# System commands
# ---------------------------------------------------------------------------

class TestSystemCommands:
    @responses_lib.activate
    def test_reboot_without_save(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/reboot.cgi", body="")
        reboot(_session())
        assert _form() == {"reboot_op": "reboot^", "save_op": "false"}

    @responses_lib.activate
    def test_reboot_with_save(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/reboot.cgi", body="")
        reboot(_session(), save_config=True)
        assert _form()["save_op"] == "true"

    @responses_lib.activate
    def test_save_config(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/savingconfig.cgi", body="")
        save_config(_session())
        assert _form() == {"action_op": "save^"}

    @responses_lib.activate
    def test_set_system_name(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/system_name_set.cgi", body="")
        set_system_name(_session(), "core sw")
        assert _form() == {"sysName": "core sw^"}

    def test_set_system_name_rejects_empty(self) -> None:
        with pytest.raises(EasySmartValidationError):
            set_system_name(_session(), "")

    def test_set_system_name_rejects_delimiter(self) -> None:
        with pytest.raises(EasySmartValidationError):
            set_system_name(_session(), "a^b")

    @responses_lib.activate
    def test_set_led(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/led_on_set.cgi", body="")
        set_led(_session(), False)
        assert _form() == {"rd_led": "0^", "led_cfg": "Apply"}

    @responses_lib.activate
    def test_factory_reset(self) -> None:
        responses_lib.add(responses_lib.POST, f"{_BASE}/reset.cgi", body="")
        factory_reset(_session())
        assert _form() == {"reset_op": "factory^"}
