"""Session lifecycle for a single managed switch.

:class:`SessionManager` owns the only :class:`DeviceConnection` in the
process, the persisted :class:`DeviceSession`, and the decision of when a
full login is needed.  Everything else (the NAPALM driver, the background
monitor, application code) goes through it.

State machine::

    NO_SESSION -> AUTHENTICATING -> READY -> (EXPIRED | UNREACHABLE)
                       ^                              |
                       +------------------------------+
"""

from __future__ import annotations

import contextlib
import dataclasses
import datetime
import enum
import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from napalm_easysmart.client import diag_ops, port_ops, system_ops, vlan_ops
from napalm_easysmart.client.errors import (
    EasySmartAuthError,
    EasySmartConnectionError,
    EasySmartProtocolError,
)
from napalm_easysmart.client.session import EasySmartCredentials
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.connection import DeviceConnection
from napalm_easysmart.events import (
    CABLE_DIAGNOSTICS,
    PORT_CHANGE,
    PORT_CONFIG_CHANGE,
    PORT_INFO,
    SYSTEM_COMMAND,
    SYSTEM_INFO,
    VLAN_CHANGE,
    VLAN_INFO,
    EventRecorder,
    NullEventRecorder,
)
from napalm_easysmart.model.cable import CablePortDiagnostic
from napalm_easysmart.model.identity import DeviceIdentity, IdentityResult
from napalm_easysmart.model.port import PortRecord, PortSpeed
from napalm_easysmart.model.session import DeviceSession
from napalm_easysmart.model.vlan import VlanTable
from napalm_easysmart.storage import SessionStore
from napalm_easysmart.utils.port_diff import diff_ports
from napalm_easysmart.utils.redact import redact_host

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[EasySmartCredentials, SwitchSettings], DeviceConnection]
Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SessionState(enum.Enum):
    NO_SESSION = "no_session"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    EXPIRED = "expired"
    UNREACHABLE = "unreachable"


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Outcome of a mutating command.

    Attributes:
        success: ``True`` if the switch accepted the command.
        message: Human-readable summary, or the failure reason.
    """

    success: bool
    message: str


class SessionManager:
    """Keep one authenticated connection alive and hand it out.

    Logins are rationed: :meth:`ensure_ready` with unchanged credentials
    reuses the live handle or the persisted cookie and logs in at most once
    per call; changing any credential discards the old cookie and forces
    exactly one fresh login.

    Queries and commands are serialised by a re-entrant lock, so the
    manager may be shared between threads.

    Args:
        store: Where the device session is persisted.
        recorder: Receives query and command events.
        settings: Timeouts and cookie lifetime.
        connection_factory: Builds a :class:`DeviceConnection`; replaceable
            for tests.
        clock: Returns the current aware UTC time; replaceable for tests.
    """

    def __init__(
        self,
        store: SessionStore,
        recorder: EventRecorder | None = None,
        settings: SwitchSettings | None = None,
        connection_factory: ConnectionFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self.recorder: EventRecorder = recorder or NullEventRecorder()
        self.settings: SwitchSettings = settings or SwitchSettings()
        self._factory: ConnectionFactory = connection_factory or DeviceConnection
        self._clock: Clock = clock or utcnow
        self._lock = threading.RLock()
        self._handle: DeviceConnection | None = None
        self._state = SessionState.NO_SESSION
        self._last_ports: list[PortRecord] | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stored_session(self) -> DeviceSession | None:
        return self._store.load()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def ensure_ready(self, credentials: EasySmartCredentials) -> DeviceConnection:
        """Return a live connection for *credentials*, logging in if needed.

        Raises:
            EasySmartConnectionError: If the switch cannot be reached.
            EasySmartAuthError: If the switch rejects the credentials.
        """
        with self._lock:
            stored = self._store.load()
            if stored is None or not stored.matches(credentials):
                logger.info("New credentials for %s; starting a fresh session",
                            redact_host(credentials.host))
                self._drop_handle()
                self._last_ports = None
                fresh = DeviceSession.for_credentials(credentials)
                self._store.save(fresh)
                return self._login(fresh)
            return self._resume(stored)

    def connection(self) -> DeviceConnection:
        """Return a live connection for the stored credentials.

        Raises:
            EasySmartAuthError: If no session was ever stored, or the stored
                credentials are rejected.
            EasySmartConnectionError: If the switch cannot be reached.
        """
        with self._lock:
            stored = self._store.load()
            if stored is None:
                raise EasySmartAuthError(
                    "No switch session stored; call ensure_ready() with credentials first"
                )
            return self._resume(stored)

    def renew(self) -> DeviceConnection:
        """Make sure the session is live and push the cookie expiry forward."""
        with self._lock:
            conn = self.connection()
            stored = self._store.load()
            if stored is not None:
                cookie = conn.session_cookie or stored.session_cookie
                self._store.save(
                    stored.with_cookie(cookie, self._clock() + self.settings.cookie_lifetime)
                )
            logger.info("Session to %s renewed", conn.display_host)
            return conn

    def close(self) -> None:
        """Drop the live handle; the persisted session is kept."""
        with self._lock:
            self._drop_handle()
            self._state = SessionState.NO_SESSION

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_identity(self) -> IdentityResult:
        with self._lock:
            conn = self.connection()
            with self._guard():
                identity = conn.get_identity()
            if isinstance(identity, DeviceIdentity):
                payload: dict[str, Any] = dataclasses.asdict(identity)
            else:
                payload = {"unstructured": True, "length": len(identity.body)}
            self._record(SYSTEM_INFO, payload)
            return identity

    def get_ports(self) -> list[PortRecord]:
        """Return the port table, recording one event per changed port."""
        with self._lock:
            conn = self.connection()
            with self._guard():
                ports = conn.get_ports()
            self._record(PORT_INFO, {"ports": [p.to_dict() for p in ports]})
            if self._last_ports is not None:
                for change in diff_ports(self._last_ports, ports):
                    self._record(PORT_CHANGE, {
                        "port": change.port_number,
                        "fields": list(change.fields),
                        "before": change.before.to_dict() if change.before else None,
                        "after": change.after.to_dict() if change.after else None,
                    })
            self._last_ports = ports
            return ports

    def get_vlans(self) -> VlanTable:
        with self._lock:
            conn = self.connection()
            with self._guard():
                table = conn.get_vlans()
            self._record(VLAN_INFO, {
                "enabled": table.enabled,
                "port_count": table.port_count,
                "vlans": [v.to_dict() for v in table.vlans],
                "length_mismatch": table.length_mismatch,
            })
            return table

    def run_cable_diagnostics(self, ports: Iterable[int]) -> list[CablePortDiagnostic]:
        selected = list(ports)
        diag_ops.build_cable_query(selected)
        with self._lock:
            conn = self.connection()
            with self._guard():
                results = conn.run_cable_diagnostics(selected)
            self._record(CABLE_DIAGNOSTICS, {
                "ports": selected,
                "results": [r.to_dict() for r in results if r.port_number in selected],
            })
            return results

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_port_config(
        self,
        port: int,
        enabled: bool,
        speed: int = PortSpeed.AUTO,
        flow_control: bool = False,
    ) -> CommandResult:
        return self._command(
            PORT_CONFIG_CHANGE,
            f"Port {port} configuration",
            {"port": port, "enabled": enabled, "speed": int(speed),
             "flow_control": flow_control},
            lambda c: c.set_port_config(port, enabled, speed, flow_control),
            check=lambda: port_ops.build_port_payload(port, enabled, speed, flow_control),
        )

    def create_vlan(
        self,
        vlan_id: int,
        name: str = "",
        tagged_ports: Iterable[int] = (),
        untagged_ports: Iterable[int] = (),
    ) -> CommandResult:
        """Add or modify an 802.1Q VLAN."""
        tagged, untagged = list(tagged_ports), list(untagged_ports)
        return self._command(
            VLAN_CHANGE,
            f"VLAN {vlan_id} creation",
            {"operation": "create", "vlan_id": vlan_id, "name": name,
             "tagged_ports": tagged, "untagged_ports": untagged},
            lambda c: c.create_dot1q_vlan(vlan_id, name, tagged, untagged),
            check=lambda: vlan_ops.build_dot1q_vlan_query(vlan_id, name, tagged, untagged),
        )

    def create_port_vlan(self, vlan_id: int, ports: Iterable[int]) -> CommandResult:
        members = list(ports)
        return self._command(
            VLAN_CHANGE,
            f"Port-based VLAN {vlan_id} creation",
            {"operation": "create_port_based", "vlan_id": vlan_id, "ports": members},
            lambda c: c.create_port_vlan(vlan_id, members),
            check=lambda: vlan_ops.build_port_vlan_query(vlan_id, members),
        )

    def delete_vlans(self, vlan_ids: Iterable[int]) -> CommandResult:
        vids = list(vlan_ids)
        return self._command(
            VLAN_CHANGE,
            f"VLAN {vids} deletion",
            {"operation": "delete", "vlan_ids": vids},
            lambda c: c.delete_vlans(vids),
            check=lambda: vlan_ops.build_vlan_delete_query(vids),
        )

    def delete_port_vlans(self, vlan_ids: Iterable[int]) -> CommandResult:
        vids = list(vlan_ids)
        return self._command(
            VLAN_CHANGE,
            f"Port-based VLAN {vids} deletion",
            {"operation": "delete_port_based", "vlan_ids": vids},
            lambda c: c.delete_port_vlans(vids),
            check=lambda: vlan_ops.build_port_vlan_delete_query(vids),
        )

    def set_pvid(self, ports: Iterable[int], pvid: int) -> CommandResult:
        members = list(ports)
        return self._command(
            VLAN_CHANGE,
            f"PVID {pvid}",
            {"operation": "set_pvid", "pvid": pvid, "ports": members},
            lambda c: c.set_pvid(members, pvid),
            check=lambda: vlan_ops.build_pvid_query(members, pvid),
        )

    def reboot(self, save_config: bool = False) -> CommandResult:
        result = self._command(
            SYSTEM_COMMAND,
            "Reboot",
            {"command": "reboot", "save_config": save_config},
            lambda c: c.reboot(save_config=save_config),
        )
        if result.success:
            self._expire_after_restart()
        return result

    def save_config(self) -> CommandResult:
        return self._command(
            SYSTEM_COMMAND, "Configuration save", {"command": "save_config"},
            lambda c: c.save_config(),
        )

    def set_system_name(self, name: str) -> CommandResult:
        return self._command(
            SYSTEM_COMMAND, "System name change",
            {"command": "set_system_name", "name": name},
            lambda c: c.set_system_name(name),
            check=lambda: system_ops.build_system_name_payload(name),
        )

    def set_led(self, enabled: bool) -> CommandResult:
        return self._command(
            SYSTEM_COMMAND, "LED change", {"command": "set_led", "enabled": enabled},
            lambda c: c.set_led(enabled),
        )

    def factory_reset(self) -> CommandResult:
        result = self._command(
            SYSTEM_COMMAND, "Factory reset", {"command": "factory_reset"},
            lambda c: c.factory_reset(),
        )
        if result.success:
            self._expire_after_restart()
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resume(self, stored: DeviceSession) -> DeviceConnection:
        if self._handle is not None:
            if self._handle.is_logged_in():
                self._state = SessionState.READY
                return self._handle
            logger.info("Session to %s is no longer valid", self._handle.display_host)
            self._state = SessionState.EXPIRED
            self._drop_handle()
            return self._login(stored)

        if stored.cookie_valid(self._clock()) and stored.session_cookie is not None:
            conn = self._factory(stored.credentials, self.settings)
            conn.set_session_cookie(stored.session_cookie)
            if conn.is_logged_in():
                logger.debug("Resumed stored session to %s", conn.display_host)
                self._handle = conn
                self._state = SessionState.READY
                return conn
            conn.close()
            self._state = SessionState.EXPIRED
        return self._login(stored)

    def _login(self, stored: DeviceSession) -> DeviceConnection:
        conn = self._factory(stored.credentials, self.settings)
        self._state = SessionState.AUTHENTICATING
        try:
            conn.login()
        except EasySmartAuthError:
            conn.close()
            self._state = SessionState.NO_SESSION
            raise
        except EasySmartConnectionError as exc:
            conn.close()
            self._state = SessionState.UNREACHABLE
            raise EasySmartConnectionError(
                f"Switch at {redact_host(stored.host)} is unreachable: {exc}"
            ) from exc

        expires = self._clock() + self.settings.cookie_lifetime
        self._store.save(stored.with_cookie(conn.session_cookie, expires))
        self._handle = conn
        self._state = SessionState.READY
        return conn

    def _drop_handle(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _expire_after_restart(self) -> None:
        with self._lock:
            self._drop_handle()
            stored = self._store.load()
            if stored is not None:
                self._store.save(stored.with_cookie(None, None))
            self._state = SessionState.EXPIRED

    @contextlib.contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except EasySmartConnectionError:
            self._state = SessionState.UNREACHABLE
            self._drop_handle()
            raise

    def _command(
        self,
        category: str,
        action: str,
        payload: dict[str, Any],
        call: Callable[[DeviceConnection], None],
        check: Callable[[], object] | None = None,
    ) -> CommandResult:
        if check is not None:
            # Raises EasySmartValidationError before any request is made.
            check()
        with self._lock:
            conn = self.connection()
            try:
                with self._guard():
                    call(conn)
            except EasySmartProtocolError as exc:
                logger.warning("%s on %s failed: %s", action, conn.display_host, exc)
                result = CommandResult(success=False, message=str(exc))
            else:
                logger.info("%s on %s succeeded", action, conn.display_host)
                result = CommandResult(success=True, message=f"{action} succeeded")
            self._record(category, {**payload, "success": result.success,
                                    "message": result.message})
            return result

    def _record(self, category: str, payload: dict[str, Any]) -> None:
        try:
            self.recorder.record_event(category, payload)
        except Exception:  # noqa: BLE001
            logger.exception("Event recorder failed for %s", category)
