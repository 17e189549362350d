"""Argument checks run before any write reaches the switch."""

from __future__ import annotations

from collections.abc import Iterable

from napalm_easysmart.client.errors import EasySmartValidationError
from napalm_easysmart.model.port import SETTABLE_SPEEDS, PortSpeed
from napalm_easysmart.vendor.easysmart.endpoints import VALUE_SUFFIX
from napalm_easysmart.vendor.easysmart.mappings import (
    MAX_NAME_LENGTH,
    MAX_SUPPORTED_PORTS,
    MAX_VLAN_ID,
    MIN_PORT,
    MIN_VLAN_ID,
)


def validate_port(port: int) -> int:
    """Return *port* if it is a 1-based port number the console can address."""
    if isinstance(port, bool) or not isinstance(port, int):
        raise EasySmartValidationError(f"Port must be an integer, got {port!r}")
    if not MIN_PORT <= port <= MAX_SUPPORTED_PORTS:
        raise EasySmartValidationError(
            f"Port {port} out of range {MIN_PORT}..{MAX_SUPPORTED_PORTS}"
        )
    return port


def validate_ports(ports: Iterable[int], what: str = "ports") -> list[int]:
    """Validate a non-empty, duplicate-free list of ports.

    Args:
        ports: Port numbers in caller order.
        what: Name used in error messages.

    Returns:
        The ports as a list, order preserved.

    Raises:
        EasySmartValidationError: If the list is empty, has duplicates or
            holds an out-of-range port.
    """
    checked = [validate_port(p) for p in ports]
    if not checked:
        raise EasySmartValidationError(f"{what} must not be empty")
    if len(set(checked)) != len(checked):
        raise EasySmartValidationError(f"{what} contain duplicates: {checked}")
    return checked


def validate_vlan_id(vlan_id: int) -> int:
    """Return *vlan_id* if it lies in 1..4094."""
    if isinstance(vlan_id, bool) or not isinstance(vlan_id, int):
        raise EasySmartValidationError(f"VLAN ID must be an integer, got {vlan_id!r}")
    if not MIN_VLAN_ID <= vlan_id <= MAX_VLAN_ID:
        raise EasySmartValidationError(
            f"VLAN ID {vlan_id} out of range {MIN_VLAN_ID}..{MAX_VLAN_ID}"
        )
    return vlan_id


def validate_vlan_ids(vlan_ids: Iterable[int]) -> list[int]:
    """Validate a non-empty, duplicate-free list of VLAN IDs."""
    checked = [validate_vlan_id(v) for v in vlan_ids]
    if not checked:
        raise EasySmartValidationError("VLAN list must not be empty")
    if len(set(checked)) != len(checked):
        raise EasySmartValidationError(f"VLAN list contains duplicates: {checked}")
    return checked


def validate_speed(speed: int) -> PortSpeed:
    """Return the :class:`PortSpeed` for *speed* if a port can be set to it."""
    parsed = PortSpeed.from_code(speed)
    if parsed not in SETTABLE_SPEEDS:
        raise EasySmartValidationError(
            f"Speed code {speed!r} is not settable "
            f"(expected {min(SETTABLE_SPEEDS)}..{max(SETTABLE_SPEEDS)})"
        )
    return parsed


def validate_name(name: str, what: str = "name", allow_empty: bool = True) -> str:
    """Check a VLAN or system name against the console's input rules.

    Raises:
        EasySmartValidationError: If the name is too long, contains the
            ``^`` delimiter or a non-printable character, or is empty when
            *allow_empty* is false.
    """
    if not isinstance(name, str):
        raise EasySmartValidationError(f"{what} must be a string, got {name!r}")
    if not name and not allow_empty:
        raise EasySmartValidationError(f"{what} must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise EasySmartValidationError(
            f"{what} longer than {MAX_NAME_LENGTH} characters: {name!r}"
        )
    if VALUE_SUFFIX in name:
        raise EasySmartValidationError(f"{what} must not contain {VALUE_SUFFIX!r}")
    if not name.isprintable():
        raise EasySmartValidationError(f"{what} contains non-printable characters")
    return name
