"""Unit tests for napalm_easysmart.manager.SessionManager.

A fake connection factory stands in for the switch so the login rationing
and state transitions can be checked without network I/O.  The input
validation tests also run a real DeviceConnection against a ``responses``
console to show that nothing is sent for rejected arguments.
"""

from __future__ import annotations

import datetime

import pytest
import responses as rsps_lib

from napalm_easysmart.client.errors import (
    EasySmartAuthError,
    EasySmartConnectionError,
    EasySmartValidationError,
)
from napalm_easysmart.client.session import EasySmartCredentials
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.events import (
    PORT_CHANGE,
    PORT_CONFIG_CHANGE,
    PORT_INFO,
    SYSTEM_COMMAND,
    SYSTEM_INFO,
    VLAN_CHANGE,
)
from napalm_easysmart.manager import CommandResult, SessionManager, SessionState
from napalm_easysmart.model.port import PortRecord, PortSpeed
from napalm_easysmart.storage import MemorySessionStore

_LIFETIME = datetime.timedelta(minutes=30)


# ---------------------------------------------------------------------------
# ensure_ready
# ---------------------------------------------------------------------------

class TestEnsureReady:
    def test_first_call_logs_in_and_persists_cookie(
        self, manager, switch, store, clock, creds
    ) -> None:
        manager.ensure_ready(creds)

        assert switch.logins == 1
        assert manager.state == SessionState.READY
        stored = store.load()
        assert stored.matches(creds)
        assert stored.session_cookie == "cookie-1"
        assert stored.cookie_expires_at == clock.now + _LIFETIME

    def test_repeated_calls_log_in_once(self, manager, switch, creds) -> None:
        first = manager.ensure_ready(creds)
        for _ in range(5):
            assert manager.ensure_ready(creds) is first
        assert switch.logins == 1

    @pytest.mark.parametrize(
        "changed",
        [
            EasySmartCredentials("192.168.0.1", "operator", "pw"),
            EasySmartCredentials("switch.lan", "admin", "pw"),
        ],
    )
    def test_credential_change_forces_one_fresh_login(
        self, manager, switch, store, creds, changed
    ) -> None:
        old = manager.ensure_ready(creds)
        new = manager.ensure_ready(changed)

        assert switch.logins == 2
        assert old.closed is True
        assert new is not old
        stored = store.load()
        assert stored.matches(changed)
        assert stored.session_cookie == "cookie-2"

    def test_new_credentials_saved_without_cookie_before_login(
        self, manager, switch, store, creds
    ) -> None:
        manager.ensure_ready(creds)
        switch.password = "other"
        with pytest.raises(EasySmartAuthError):
            manager.ensure_ready(EasySmartCredentials("192.168.0.1", "admin", "wrong"))
        stored = store.load()
        assert stored.password == "wrong"
        assert stored.session_cookie is None
        assert manager.state == SessionState.NO_SESSION

    def test_stored_cookie_reused_after_restart(
        self, manager, switch, store, recorder, clock, creds
    ) -> None:
        manager.ensure_ready(creds)
        clock.advance(minutes=10)

        restarted = SessionManager(
            store=store,
            recorder=recorder,
            connection_factory=manager._factory,
            clock=clock,
        )
        conn = restarted.ensure_ready(creds)

        assert switch.logins == 1
        assert conn.session_cookie == "cookie-1"

    def test_expired_stored_cookie_not_checked(
        self, manager, switch, store, recorder, clock, creds
    ) -> None:
        manager.ensure_ready(creds)
        clock.advance(minutes=31)
        checks = switch.liveness_checks

        restarted = SessionManager(
            store=store, recorder=recorder, connection_factory=manager._factory, clock=clock,
        )
        restarted.ensure_ready(creds)

        assert switch.liveness_checks == checks
        assert switch.logins == 2

    def test_invalidated_session_logs_in_exactly_once(self, manager, switch, creds) -> None:
        manager.ensure_ready(creds)
        switch.valid_cookies.clear()
        manager.ensure_ready(creds)
        assert switch.logins == 2
        assert manager.state == SessionState.READY

    def test_unreachable_switch(self, manager, switch, creds) -> None:
        switch.reachable = False
        with pytest.raises(EasySmartConnectionError) as exc_info:
            manager.ensure_ready(creds)
        assert "192.168.0.1" in str(exc_info.value)
        assert manager.state == SessionState.UNREACHABLE

    def test_wrong_password(self, manager, creds) -> None:
        with pytest.raises(EasySmartAuthError):
            manager.ensure_ready(EasySmartCredentials(creds.host, creds.username, "bad"))


# ---------------------------------------------------------------------------
# connection / renew / close
# ---------------------------------------------------------------------------

class TestConnection:
    def test_no_stored_session(self, manager) -> None:
        with pytest.raises(EasySmartAuthError):
            manager.connection()

    def test_reuses_live_handle(self, manager, switch, creds) -> None:
        conn = manager.ensure_ready(creds)
        assert manager.connection() is conn
        assert switch.logins == 1

    def test_rebuilds_after_close(self, manager, switch, creds) -> None:
        manager.ensure_ready(creds)
        manager.close()
        assert manager.state == SessionState.NO_SESSION
        manager.connection()
        assert switch.logins == 1

    def test_renew_pushes_expiry(self, manager, store, clock, creds) -> None:
        manager.ensure_ready(creds)
        clock.advance(minutes=20)
        manager.renew()
        assert store.load().cookie_expires_at == clock.now + _LIFETIME


# ---------------------------------------------------------------------------
# Queries and events
# ---------------------------------------------------------------------------

class TestQueries:
    def test_identity_event(self, manager, recorder, creds) -> None:
        manager.ensure_ready(creds)
        identity = manager.get_identity()
        category, payload = recorder.events[-1]
        assert category == SYSTEM_INFO
        assert payload["mac_address"] == identity.mac_address

    def test_port_change_events(self, manager, switch, recorder, creds) -> None:
        manager.ensure_ready(creds)
        manager.get_ports()
        switch.ports[1] = PortRecord(
            2, True, PortSpeed.AUTO, PortSpeed.LINK_DOWN, False, False, None
        )
        manager.get_ports()

        assert recorder.categories() == [PORT_INFO, PORT_INFO, PORT_CHANGE]
        change = recorder.events[-1][1]
        assert change["port"] == 2
        assert change["fields"] == ["speed_actual"]
        assert change["after"]["speed_actual"] == "Link Down"

    def test_query_failure_marks_unreachable(self, manager, switch, creds) -> None:
        manager.ensure_ready(creds)
        switch.reachable = False
        with pytest.raises(EasySmartConnectionError):
            manager.get_vlans()
        assert manager.state == SessionState.UNREACHABLE

    def test_cable_diagnostics(self, manager, recorder, creds) -> None:
        manager.ensure_ready(creds)
        results = manager.run_cable_diagnostics([1, 3])
        assert [r.port_number for r in results] == [1, 3]
        assert recorder.events[-1][1]["ports"] == [1, 3]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestCommands:
    def test_success(self, manager, switch, recorder, creds) -> None:
        manager.ensure_ready(creds)
        result = manager.create_port_vlan(10, [1, 2])
        assert result.success is True
        assert switch.commands == [("create_port_vlan", (10, [1, 2]))]
        category, payload = recorder.events[-1]
        assert category == VLAN_CHANGE
        assert payload["success"] is True

    def test_rejection_becomes_failed_result(self, manager, switch, recorder, creds) -> None:
        manager.ensure_ready(creds)
        switch.reject_commands = True
        result = manager.set_port_config(1, False)
        assert result == CommandResult(success=False, message=result.message)
        assert "Rejected by switch" in result.message
        assert recorder.events[-1][0] == PORT_CONFIG_CHANGE
        assert recorder.events[-1][1]["success"] is False

    def test_connection_error_propagates(self, manager, switch, creds) -> None:
        manager.ensure_ready(creds)
        switch.reachable = False
        with pytest.raises(EasySmartConnectionError):
            manager.save_config()

    def test_reboot_drops_session(self, manager, switch, store, recorder, creds) -> None:
        manager.ensure_ready(creds)
        assert manager.reboot(save_config=True).success is True
        assert recorder.events[-1][0] == SYSTEM_COMMAND
        assert store.load().session_cookie is None
        assert manager.state == SessionState.EXPIRED

        manager.connection()
        assert switch.logins == 2

    def test_all_commands_dispatch(self, manager, switch, creds) -> None:
        manager.ensure_ready(creds)
        manager.create_vlan(100, "users", [8], [1])
        manager.delete_vlans([100])
        manager.delete_port_vlans([10])
        manager.set_pvid([1], 100)
        manager.set_system_name("core")
        manager.set_led(True)
        assert [name for name, _ in switch.commands] == [
            "create_dot1q_vlan", "delete_vlans", "delete_port_vlans",
            "set_pvid", "set_system_name", "set_led",
        ]

    def test_settings_default(self, manager) -> None:
        assert manager.settings == SwitchSettings()


# ---------------------------------------------------------------------------
# Input validation happens before any device traffic
# ---------------------------------------------------------------------------

_INVALID_CALLS = {
    "port_out_of_range": lambda m: m.set_port_config(99, True),
    "speed_not_settable": lambda m: m.set_port_config(1, True, speed=PortSpeed.LINK_DOWN),
    "vlan_id_out_of_range": lambda m: m.create_vlan(5000, untagged_ports=[1]),
    "tagged_and_untagged": lambda m: m.create_vlan(10, "", [1], [1]),
    "vlan_without_ports": lambda m: m.create_vlan(10, "users"),
    "port_vlan_bad_member": lambda m: m.create_port_vlan(10, [49]),
    "delete_nothing": lambda m: m.delete_vlans([]),
    "delete_port_vlan_out_of_range": lambda m: m.delete_port_vlans([4095]),
    "pvid_zero": lambda m: m.set_pvid([1], 0),
    "pvid_duplicate_ports": lambda m: m.set_pvid([1, 1], 10),
    "empty_system_name": lambda m: m.set_system_name(""),
    "cable_test_no_ports": lambda m: m.run_cable_diagnostics([]),
}

_BASE_URL = "http://192.168.0.1"
_LOGIN_PAGE = '<html><form method="post" action="/logon.cgi"></form></html>'
_INFO_PAGE = '<html><script>var info_ds = {descriStr:["SW"]};</script></html>'


@pytest.fixture
def console():
    with rsps_lib.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(rsps_lib.GET, f"{_BASE_URL}/", body=_LOGIN_PAGE)
        rsps.add(rsps_lib.POST, f"{_BASE_URL}/logon.cgi", body=_INFO_PAGE)
        rsps.add(rsps_lib.GET, f"{_BASE_URL}/SystemInfoRpm.htm", body=_INFO_PAGE)
        yield rsps


@pytest.fixture
def http_manager(clock) -> SessionManager:
    """Manager backed by a real DeviceConnection talking to ``console``."""
    return SessionManager(store=MemorySessionStore(), clock=clock)


class TestValidationBeforeTraffic:
    @pytest.mark.parametrize("call", list(_INVALID_CALLS.values()), ids=list(_INVALID_CALLS))
    def test_fake_switch_untouched(self, manager, switch, recorder, creds, call) -> None:
        manager.ensure_ready(creds)
        checks, events = switch.liveness_checks, len(recorder.events)

        with pytest.raises(EasySmartValidationError):
            call(manager)

        assert switch.liveness_checks == checks
        assert switch.logins == 1
        assert switch.commands == []
        assert len(recorder.events) == events
        assert manager.state == SessionState.READY

    @pytest.mark.parametrize("call", list(_INVALID_CALLS.values()), ids=list(_INVALID_CALLS))
    def test_no_request_with_live_handle(self, http_manager, console, creds, call) -> None:
        http_manager.ensure_ready(creds)
        sent = len(console.calls)

        with pytest.raises(EasySmartValidationError):
            call(http_manager)

        assert [c.request.url for c in console.calls[sent:]] == []

    def test_no_login_without_handle(self, http_manager, console, creds) -> None:
        http_manager.ensure_ready(creds)
        http_manager.close()
        sent = len(console.calls)

        with pytest.raises(EasySmartValidationError):
            http_manager.set_port_config(99, True)
        with pytest.raises(EasySmartValidationError):
            http_manager.create_vlan(5000, untagged_ports=[1])

        assert [c.request.url for c in console.calls[sent:]] == []

    def test_valid_command_still_sent(self, http_manager, console, creds) -> None:
        console.add(rsps_lib.POST, f"{_BASE_URL}/port_setting.cgi", body="")
        http_manager.ensure_ready(creds)

        result = http_manager.set_port_config(3, True)

        assert result.success is True
        assert console.calls[-1].request.url == f"{_BASE_URL}/port_setting.cgi"
