"""Typed models for the system information page (SystemInfoRpm.htm)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceIdentity:
    """System identity snapshot parsed from the switch.

    Attributes:
        description: Device description / system name.
        mac_address: Base MAC address (e.g. ``AA:BB:CC:00:11:22``).
        ip_address: Management IPv4 address.
        subnet_mask: Management subnet mask.
        gateway: Default gateway.
        firmware_version: Firmware version string.
        hardware_version: Hardware revision string.
    """

    description: str
    mac_address: str
    ip_address: str
    subnet_mask: str
    gateway: str
    firmware_version: str
    hardware_version: str


@dataclass(frozen=True)
class RawIdentity:
    """Unstructured identity reply kept verbatim.

    Returned when no known page layout matched (e.g. after a firmware
    update changed the markup).  Callers display :attr:`body` as-is.
    """

    body: str


IdentityResult = DeviceIdentity | RawIdentity
