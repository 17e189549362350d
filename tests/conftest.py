"""Shared fakes for session manager, monitor and driver tests."""

from __future__ import annotations

import datetime
from typing import Any

import pytest

from napalm_easysmart.client.errors import (
    EasySmartAuthError,
    EasySmartCommandError,
    EasySmartRequestError,
)
from napalm_easysmart.client.session import EasySmartCredentials
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.events import ListEventRecorder
from napalm_easysmart.manager import SessionManager
from napalm_easysmart.model.cable import CablePortDiagnostic, CableState
from napalm_easysmart.model.identity import DeviceIdentity
from napalm_easysmart.model.port import PortRecord, PortSpeed
from napalm_easysmart.model.vlan import VlanRecord, VlanTable
from napalm_easysmart.storage import MemorySessionStore

START = datetime.datetime(2026, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, now: datetime.datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += datetime.timedelta(**kwargs)


class FakeSwitch:
    """State shared by all connections to one simulated switch."""

    def __init__(self, password: str = "pw") -> None:
        self.password = password
        self.reachable = True
        self.valid_cookies: set[str] = set()
        self.logins = 0
        self.liveness_checks = 0
        self.commands: list[tuple[str, tuple[Any, ...]]] = []
        self.reject_commands = False
        self.ports: list[PortRecord] = [
            PortRecord(p, True, PortSpeed.AUTO, PortSpeed.M1000_FULL, False, False, None)
            for p in (1, 2)
        ]
        self.identity = DeviceIdentity(
            "TL-SG108E", "AA:BB:CC:00:11:22", "192.168.0.1", "255.255.255.0",
            "192.168.0.254", "1.0.0", "TL-SG108E 3.0",
        )

    def _unreachable(self) -> EasySmartRequestError:
        return EasySmartRequestError("http://192.168.0.1/", ConnectionError("refused"))


class FakeConnection:
    """Stand-in for DeviceConnection that talks to a :class:`FakeSwitch`."""

    def __init__(self, switch: FakeSwitch, credentials: EasySmartCredentials) -> None:
        self.switch = switch
        self.credentials = credentials
        self.session_cookie: str | None = None
        self.closed = False

    @property
    def display_host(self) -> str:
        return self.credentials.host

    def set_session_cookie(self, value: str) -> None:
        self.session_cookie = value

    def login(self) -> None:
        if not self.switch.reachable:
            raise self.switch._unreachable()
        self.switch.logins += 1
        if self.credentials.password != self.switch.password:
            raise EasySmartAuthError("Login failed")
        self.session_cookie = f"cookie-{self.switch.logins}"
        self.switch.valid_cookies.add(self.session_cookie)

    def is_logged_in(self) -> bool:
        self.switch.liveness_checks += 1
        return self.switch.reachable and self.session_cookie in self.switch.valid_cookies

    def close(self) -> None:
        self.closed = True

    def _check(self) -> None:
        if not self.switch.reachable:
            raise self.switch._unreachable()

    def get_identity(self) -> DeviceIdentity:
        self._check()
        return self.switch.identity

    def get_ports(self) -> list[PortRecord]:
        self._check()
        return list(self.switch.ports)

    def get_vlans(self) -> VlanTable:
        self._check()
        return VlanTable(True, 8, (VlanRecord(1, untagged_ports=frozenset({1, 2})),))

    def run_cable_diagnostics(self, ports: list[int]) -> list[CablePortDiagnostic]:
        self._check()
        return [CablePortDiagnostic(p, CableState.NORMAL, 10) for p in ports]

    def __getattr__(self, name: str) -> Any:
        commands = {
            "set_port_config", "create_dot1q_vlan", "create_port_vlan", "delete_vlans",
            "delete_port_vlans", "set_pvid", "reboot", "save_config", "set_system_name",
            "set_led", "factory_reset",
        }
        if name not in commands:
            raise AttributeError(name)

        def command(*args: Any, **kwargs: Any) -> None:
            self._check()
            if self.switch.reject_commands:
                raise EasySmartCommandError(endpoint=f"/{name}", reason="Rejected by switch")
            self.switch.commands.append((name, args + tuple(kwargs.values())))

        return command


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def switch() -> FakeSwitch:
    return FakeSwitch()


@pytest.fixture
def recorder() -> ListEventRecorder:
    return ListEventRecorder()


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def manager(
    switch: FakeSwitch,
    store: MemorySessionStore,
    recorder: ListEventRecorder,
    clock: FakeClock,
) -> SessionManager:
    return SessionManager(
        store=store,
        recorder=recorder,
        settings=SwitchSettings(),
        connection_factory=lambda creds, settings: FakeConnection(switch, creds),
        clock=clock,
    )


@pytest.fixture
def creds() -> EasySmartCredentials:
    return EasySmartCredentials("192.168.0.1", "admin", "pw")
