"""Query and command handle over one authenticated switch session."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from napalm_easysmart.client import diag_ops, port_ops, system_ops, vlan_ops
from napalm_easysmart.client.session import EasySmartCredentials, EasySmartSession
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.model.cable import CablePortDiagnostic
from napalm_easysmart.model.identity import IdentityResult
from napalm_easysmart.model.port import PortRecord, PortSpeed
from napalm_easysmart.model.vlan import VlanTable
from napalm_easysmart.parser.identity import parse_identity
from napalm_easysmart.parser.port import parse_port_table
from napalm_easysmart.parser.vlan import parse_vlan_table
from napalm_easysmart.vendor.easysmart.endpoints import (
    PORT_SETTINGS,
    SYSTEM_INFO,
    VLAN_PORT_BASED,
)

logger = logging.getLogger(__name__)


class DeviceConnection:
    """Explicit handle to one switch, owned by a session manager.

    Every method maps to exactly one page load or form submission; nothing
    is retried.  Queries never raise for unparseable markup (the parsers
    degrade to fallback values), but transport and HTTP errors propagate
    as :class:`~napalm_easysmart.client.errors.EasySmartError` subclasses.

    Args:
        credentials: Target host and login credentials.
        settings: Timeouts and transport options.
    """

    def __init__(
        self,
        credentials: EasySmartCredentials,
        settings: SwitchSettings | None = None,
    ) -> None:
        self._session = EasySmartSession(credentials, settings)

    @property
    def credentials(self) -> EasySmartCredentials:
        return self._session.credentials

    @property
    def display_host(self) -> str:
        return self._session.display_host

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def test_connectivity(self) -> bool:
        return self._session.test_connectivity()

    def login(self) -> None:
        self._session.login()

    def is_logged_in(self) -> bool:
        return self._session.is_logged_in()

    @property
    def session_cookie(self) -> str | None:
        return self._session.session_cookie

    def set_session_cookie(self, value: str) -> None:
        self._session.set_session_cookie(value)

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_identity(self) -> IdentityResult:
        """Load the system information page and parse the device identity."""
        return parse_identity(self._session.get_page(SYSTEM_INFO))

    def get_ports(self) -> list[PortRecord]:
        """Load the port settings page and parse one record per port."""
        return parse_port_table(self._session.get_page(PORT_SETTINGS))

    def get_vlans(self) -> VlanTable:
        """Load the port-based VLAN page and parse the VLAN table."""
        return parse_vlan_table(self._session.get_page(VLAN_PORT_BASED))

    def run_cable_diagnostics(self, ports: Iterable[int]) -> list[CablePortDiagnostic]:
        return diag_ops.run_cable_diagnostics(self._session, ports)

    get_cable_diagnostics = run_cable_diagnostics

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_port_config(
        self,
        port: int,
        enabled: bool,
        speed: int = PortSpeed.AUTO,
        flow_control: bool = False,
    ) -> None:
        port_ops.set_port_config(self._session, port, enabled, speed, flow_control)

    def create_port_vlan(self, vlan_id: int, ports: Iterable[int]) -> None:
        vlan_ops.create_port_vlan(self._session, vlan_id, ports)

    def delete_port_vlans(self, vlan_ids: Iterable[int]) -> None:
        vlan_ops.delete_port_vlans(self._session, vlan_ids)

    def create_dot1q_vlan(
        self,
        vlan_id: int,
        name: str = "",
        tagged_ports: Iterable[int] = (),
        untagged_ports: Iterable[int] = (),
    ) -> None:
        vlan_ops.create_dot1q_vlan(self._session, vlan_id, name, tagged_ports, untagged_ports)

    def delete_vlans(self, vlan_ids: Iterable[int]) -> None:
        vlan_ops.delete_vlans(self._session, vlan_ids)

    def set_pvid(self, ports: Iterable[int], pvid: int) -> None:
        vlan_ops.set_pvid(self._session, ports, pvid)

    def reboot(self, save_config: bool = False) -> None:
        system_ops.reboot(self._session, save_config=save_config)

    def save_config(self) -> None:
        system_ops.save_config(self._session)

    def set_system_name(self, name: str) -> None:
        system_ops.set_system_name(self._session, name)

    def set_led(self, enabled: bool) -> None:
        system_ops.set_led(self._session, enabled)

    def factory_reset(self) -> None:
        system_ops.factory_reset(self._session)
