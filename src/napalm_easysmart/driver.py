"""Easy Smart NAPALM driver: top-level NetworkDriver implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from napalm.base.base import NetworkDriver

from napalm_easysmart.client.errors import EasySmartError
from napalm_easysmart.client.session import EasySmartCredentials
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.events import EventRecorder, LoggingEventRecorder, NullEventRecorder
from napalm_easysmart.manager import SessionManager
from napalm_easysmart.model.identity import DeviceIdentity
from napalm_easysmart.monitor import BackgroundMonitor
from napalm_easysmart.storage import JsonFileSessionStore, MemorySessionStore, SessionStore
from napalm_easysmart.vendor.easysmart.mappings import INTERFACE_PREFIX, SPEED_MBPS, VENDOR

logger = logging.getLogger(__name__)


def interface_name(port: int) -> str:
    return f"{INTERFACE_PREFIX}{port}"


class EasySmartDriver(NetworkDriver):  # type: ignore[misc]
    """NAPALM driver for TP-Link Easy Smart switches.

    Talks to the switch through its browser web console: pages are loaded
    and JavaScript variables embedded in them are parsed into structured
    data.  All traffic goes through a :class:`SessionManager`, so a stored
    session cookie is reused instead of logging in on every ``open()``.

    Args:
        hostname: IP address or hostname of the switch, optionally including
            the URL scheme (e.g. ``http://192.168.0.1``).
        username: Login username.
        password: Login password.
        timeout: Default request timeout in seconds.
        optional_args: Optional driver configuration overrides.
            Supported keys:

            - ``port`` (int): HTTP port, appended to *hostname*.
            - ``session_file`` (str): JSON file to persist the session in
              (default: keep it in memory only).
            - ``log_events`` (bool): Log query/command events at INFO.
            - ``keepalive`` (bool): Run a :class:`BackgroundMonitor` while
              the driver is open.
            - Any :class:`SwitchSettings` field, durations in seconds
              (``verify_tls``, ``login_timeout``, ``cookie_lifetime``, ...).
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        timeout: int = 60,
        optional_args: dict[str, Any] | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.optional_args: dict[str, Any] = optional_args or {}

        self._settings = SwitchSettings.from_optional_args(self.optional_args, timeout=timeout)
        port = self.optional_args.get("port")
        self._target: str = f"{hostname.rstrip('/')}:{int(port)}" if port else hostname
        self._manager: SessionManager | None = None
        self._monitor: BackgroundMonitor | None = None

        logger.debug(
            "EasySmartDriver initialised: host=%s user=%s", self._target, self.username
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    @property
    def manager(self) -> SessionManager:
        """The session manager; use it for commands (VLANs, ports, reboot)."""
        if self._manager is None:
            raise EasySmartError("Driver is not open; call open() first")
        return self._manager

    def open(self) -> None:
        """Create the session manager and make the session ready.

        Raises:
            EasySmartAuthError: If login is rejected by the switch.
            EasySmartConnectionError: If the switch cannot be reached.
        """
        logger.info("Opening connection to %s", self._target)
        self._manager = SessionManager(
            store=self._build_store(),
            recorder=self._build_recorder(),
            settings=self._settings,
        )
        creds = EasySmartCredentials(
            host=self._target, username=self.username, password=self.password
        )
        self._manager.ensure_ready(creds)
        if self.optional_args.get("keepalive"):
            self._monitor = BackgroundMonitor(self._manager)
            self._monitor.start()

    def close(self) -> None:
        """Stop the monitor and drop the live handle (best-effort; never raises)."""
        if self._monitor is not None:
            self._monitor.stop()
            self._monitor = None
        if self._manager is not None:
            logger.info("Closing connection to %s", self._target)
            try:
                self._manager.close()
            except Exception:  # noqa: BLE001
                logger.debug("Session close failed (ignored)", exc_info=True)
            finally:
                self._manager = None

    def is_alive(self) -> dict[str, bool]:
        if self._manager is None:
            return {"is_alive": False}
        try:
            self._manager.connection()
        except EasySmartError as exc:
            logger.debug("is_alive check failed: %s", exc)
            return {"is_alive": False}
        return {"is_alive": True}

    # ------------------------------------------------------------------
    # NAPALM getters
    # ------------------------------------------------------------------

    def get_facts(self) -> dict[str, Any]:
        """Return general device facts conforming to the NAPALM schema.

        The console reports neither uptime nor a serial number; the base MAC
        address stands in for the serial and ``uptime`` is ``-1.0``.

        Returns:
            A dict with keys: ``hostname``, ``fqdn``, ``vendor``, ``model``,
            ``serial_number``, ``os_version``, ``uptime``, ``interface_list``.
        """
        identity = self.manager.get_identity()
        ports = self.manager.get_ports()
        interface_list = [interface_name(p.port_number) for p in ports]

        if not isinstance(identity, DeviceIdentity):
            logger.warning("System information page not recognised; facts are partial")
            return {
                "hostname": self.hostname,
                "fqdn": self.hostname,
                "vendor": VENDOR,
                "model": "unknown",
                "serial_number": "",
                "os_version": "",
                "uptime": -1.0,
                "interface_list": interface_list,
            }

        hostname = identity.description or identity.ip_address or self.hostname
        return {
            "hostname": hostname,
            "fqdn": identity.ip_address or hostname,
            "vendor": VENDOR,
            "model": identity.hardware_version or "unknown",
            "serial_number": identity.mac_address,
            "os_version": identity.firmware_version,
            "uptime": -1.0,
            "interface_list": interface_list,
        }

    def get_interfaces(self) -> dict[str, Any]:
        """Return interface information conforming to the NAPALM schema.

        Returns:
            Dict keyed by interface name (``"Port 1"``), each value having
            ``is_up``, ``is_enabled``, ``description``, ``last_flapped``,
            ``speed``, ``mtu``, ``mac_address``.
        """
        result: dict[str, Any] = {}
        for port in self.manager.get_ports():
            result[interface_name(port.port_number)] = {
                "is_up": bool(port.link_up),
                "is_enabled": bool(port.enabled),
                "description": port.trunk_label,
                "last_flapped": -1.0,
                "speed": float(SPEED_MBPS.get(int(port.speed_actual), 0)),
                "mtu": 0,
                "mac_address": "",
            }
        return result

    def get_vlans(self) -> dict[int, Any]:
        """Return VLAN information conforming to the NAPALM schema.

        Returns:
            Dict keyed by integer VLAN ID, each value being::

                {"name": str, "interfaces": [str, ...]}
        """
        table = self.manager.get_vlans()
        return {
            vlan.vlan_id: {
                "name": vlan.name,
                "interfaces": [interface_name(p) for p in vlan.member_ports],
            }
            for vlan in sorted(table.vlans, key=lambda v: v.vlan_id)
        }

    def cable_test(self, ports: Iterable[int] | None = None) -> dict[str, Any]:
        """Run a cable diagnostic and return the results per interface.

        Args:
            ports: Ports to test; all ports of the switch when omitted.

        Returns:
            Dict keyed by interface name; untested ports are left out.
        """
        selected = list(ports) if ports is not None else [
            p.port_number for p in self.manager.get_ports()
        ]
        results = self.manager.run_cable_diagnostics(selected)
        return {
            interface_name(r.port_number): r.to_dict()
            for r in results
            if not r.untested
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_store(self) -> SessionStore:
        path = self.optional_args.get("session_file")
        if path:
            return JsonFileSessionStore(str(path))
        return MemorySessionStore()

    def _build_recorder(self) -> EventRecorder:
        if self.optional_args.get("log_events"):
            return LoggingEventRecorder()
        return NullEventRecorder()
