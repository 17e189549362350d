"""Low-level VLAN write operations for Easy Smart switches.

The VLAN pages submit with GET and repeat the same key once per selected
port or VLAN, every value carrying the ``^`` delimiter.  The switch answers
HTTP 200 whether or not it accepted the change; only the
``Operation successful`` tip in the body confirms it.

Payloads:

    PORT-BASED CREATE: GET /pvlanSet.cgi
        vid=10^&selPorts=1^&selPorts=2^&pvlan_add=Apply

    PORT-BASED DELETE: GET /pvlanSet.cgi
        selVlans=10^&selVlans=20^&pvlan_del=Delete

    802.1Q ADD/MODIFY: GET /qvlanSet.cgi
        qvlan_en=1^&vid=100^&vname=users^&selTagPorts=8^
        &selUntagPorts=1^&selUntagPorts=2^&qvlan_add=Add%2FModify

    802.1Q DELETE: GET /qvlanSet.cgi
        selVlans=100^&qvlan_del=Delete

    PVID: GET /vlanPvidSet.cgi
        pbm=1^&pbm=2^&pvid=100^&pvid_apply=Apply
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from napalm_easysmart.client.errors import EasySmartValidationError
from napalm_easysmart.client.session import EasySmartSession, check_success, suffixed
from napalm_easysmart.client.validation import (
    validate_name,
    validate_port,
    validate_ports,
    validate_vlan_id,
    validate_vlan_ids,
)
from napalm_easysmart.vendor.easysmart.endpoints import PORT_VLAN_SET, PVID_SET, QVLAN_SET

logger = logging.getLogger(__name__)


def create_port_vlan(
    session: EasySmartSession,
    vlan_id: int,
    ports: Iterable[int],
) -> None:
    """Create (or redefine) a port-based VLAN.

    Args:
        session: Active authenticated session.
        vlan_id: VLAN identifier (1..4094).
        ports: Member ports, one ``selPorts`` key each, in caller order.

    Raises:
        EasySmartValidationError: On invalid input (no request sent).
        EasySmartCommandError: If the switch does not confirm the change.
    """
    pairs = build_port_vlan_query(vlan_id, ports)
    logger.debug("Creating port-based VLAN %d: %s", vlan_id, pairs)
    check_success(PORT_VLAN_SET, session.send_query(PORT_VLAN_SET, pairs))
    logger.info("Port-based VLAN %d created", vlan_id)


def delete_port_vlans(session: EasySmartSession, vlan_ids: Iterable[int]) -> None:
    """Delete one or more port-based VLANs in a single request.

    Raises:
        EasySmartValidationError: If *vlan_ids* is empty or invalid.
        EasySmartCommandError: If the switch does not confirm the change.
    """
    pairs = build_port_vlan_delete_query(vlan_ids)
    logger.debug("Deleting port-based VLANs: %s", pairs)
    check_success(PORT_VLAN_SET, session.send_query(PORT_VLAN_SET, pairs))
    logger.info("Port-based VLAN(s) deleted")


def create_dot1q_vlan(
    session: EasySmartSession,
    vlan_id: int,
    name: str = "",
    tagged_ports: Iterable[int] = (),
    untagged_ports: Iterable[int] = (),
) -> None:
    """Add or modify an 802.1Q VLAN.

    The 802.1Q mode flag (``qvlan_en``) is sent with every request, so the
    switch leaves port-based mode if it was in it.

    Args:
        session: Active authenticated session.
        vlan_id: VLAN identifier (1..4094).
        name: VLAN name, at most 32 printable characters.
        tagged_ports: Ports carrying the VLAN tagged.
        untagged_ports: Ports carrying the VLAN untagged.

    Raises:
        EasySmartValidationError: If no port is given, a port appears in
            both sets, or any value is out of range.
        EasySmartCommandError: If the switch does not confirm the change.
    """
    pairs = build_dot1q_vlan_query(vlan_id, name, tagged_ports, untagged_ports)
    logger.debug("Creating 802.1Q VLAN %d: %s", vlan_id, pairs)
    check_success(QVLAN_SET, session.send_query(QVLAN_SET, pairs))
    logger.info("802.1Q VLAN %d created", vlan_id)


def delete_vlans(session: EasySmartSession, vlan_ids: Iterable[int]) -> None:
    """Delete one or more 802.1Q VLANs in a single request.

    Raises:
        EasySmartValidationError: If *vlan_ids* is empty or invalid.
        EasySmartCommandError: If the switch does not confirm the change.
    """
    pairs = build_vlan_delete_query(vlan_ids)
    logger.debug("Deleting 802.1Q VLANs: %s", pairs)
    check_success(QVLAN_SET, session.send_query(QVLAN_SET, pairs))
    logger.info("802.1Q VLAN(s) deleted")


def set_pvid(session: EasySmartSession, ports: Iterable[int], pvid: int) -> None:
    """Set the port VLAN ID (native VLAN for untagged ingress) on *ports*."""
    pairs = build_pvid_query(ports, pvid)
    logger.debug("Setting PVID %d: %s", pvid, pairs)
    check_success(PVID_SET, session.send_query(PVID_SET, pairs))
    logger.info("PVID %d applied", pvid)


# ---------------------------------------------------------------------------
# Query builders (validate, never touch the network)
# ---------------------------------------------------------------------------

def build_port_vlan_query(vlan_id: int, ports: Iterable[int]) -> list[tuple[str, str]]:
    validate_vlan_id(vlan_id)
    members = validate_ports(ports)
    pairs = [("vid", suffixed(vlan_id))]
    pairs += [("selPorts", suffixed(p)) for p in members]
    pairs.append(("pvlan_add", "Apply"))
    return pairs


def build_port_vlan_delete_query(vlan_ids: Iterable[int]) -> list[tuple[str, str]]:
    pairs = [("selVlans", suffixed(v)) for v in validate_vlan_ids(vlan_ids)]
    pairs.append(("pvlan_del", "Delete"))
    return pairs


def build_dot1q_vlan_query(
    vlan_id: int,
    name: str = "",
    tagged_ports: Iterable[int] = (),
    untagged_ports: Iterable[int] = (),
) -> list[tuple[str, str]]:
    """Validate an 802.1Q add/modify request and return its query pairs."""
    validate_vlan_id(vlan_id)
    validate_name(name, what="VLAN name")
    tagged = [validate_port(p) for p in tagged_ports]
    untagged = [validate_port(p) for p in untagged_ports]
    validate_ports(tagged + untagged, what="VLAN member ports")
    overlap = set(tagged) & set(untagged)
    if overlap:
        raise EasySmartValidationError(
            f"Ports {sorted(overlap)} cannot be both tagged and untagged"
        )

    pairs = [
        ("qvlan_en", suffixed(1)),
        ("vid", suffixed(vlan_id)),
        ("vname", suffixed(name)),
    ]
    pairs += [("selTagPorts", suffixed(p)) for p in tagged]
    pairs += [("selUntagPorts", suffixed(p)) for p in untagged]
    pairs.append(("qvlan_add", "Add/Modify"))
    return pairs


def build_vlan_delete_query(vlan_ids: Iterable[int]) -> list[tuple[str, str]]:
    pairs = [("selVlans", suffixed(v)) for v in validate_vlan_ids(vlan_ids)]
    pairs.append(("qvlan_del", "Delete"))
    return pairs


def build_pvid_query(ports: Iterable[int], pvid: int) -> list[tuple[str, str]]:
    members = validate_ports(ports)
    validate_vlan_id(pvid)
    pairs = [("pbm", suffixed(p)) for p in members]
    pairs += [("pvid", suffixed(pvid)), ("pvid_apply", "Apply")]
    return pairs
