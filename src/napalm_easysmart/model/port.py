"""Typed models for port data (PortSettingRpm.htm)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from napalm_easysmart.vendor.easysmart.mappings import (
    FLOW_CONTROL_LABELS,
    PORT_STATE_LABELS,
    SPEED_LABELS,
    UNKNOWN_LABEL,
)


class PortSpeed(IntEnum):
    """Speed/duplex codes used by the ``spd_cfg`` / ``spd_act`` arrays."""

    UNKNOWN = -1
    LINK_DOWN = 0
    AUTO = 1
    M10_HALF = 2
    M10_FULL = 3
    M100_HALF = 4
    M100_FULL = 5
    M1000_FULL = 6

    @classmethod
    def from_code(cls, code: int | None) -> PortSpeed:
        """Map a raw code to a member, ``UNKNOWN`` for anything unrecognised."""
        if code is None:
            return cls.UNKNOWN
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        """Label as shown in the console (``"1000MF"``, ``"Link Down"``, ...)."""
        return SPEED_LABELS.get(int(self), UNKNOWN_LABEL)


# Codes a port can be configured to ("Link Down" is status only).
SETTABLE_SPEEDS: frozenset[PortSpeed] = frozenset(
    s for s in PortSpeed if s not in (PortSpeed.UNKNOWN, PortSpeed.LINK_DOWN)
)


def _bool_label(value: bool | None, labels: dict[bool, str]) -> str:
    return UNKNOWN_LABEL if value is None else labels[value]


@dataclass(frozen=True)
class PortRecord:
    """Configuration and status of one port at the time of the query.

    Fields the switch did not report are ``None`` (booleans) or
    :attr:`PortSpeed.UNKNOWN` (speeds) and render as ``"Unknown"``.

    Attributes:
        port_number: 1-based port number.
        enabled: Administrative state.
        speed_configured: Configured speed/duplex.
        speed_actual: Negotiated speed/duplex, ``LINK_DOWN`` without link.
        flow_control_configured: Configured flow control.
        flow_control_actual: Negotiated flow control.
        trunk_group: LAG number the port belongs to, ``None`` if none.
    """

    port_number: int
    enabled: bool | None = None
    speed_configured: PortSpeed = PortSpeed.UNKNOWN
    speed_actual: PortSpeed = PortSpeed.UNKNOWN
    flow_control_configured: bool | None = None
    flow_control_actual: bool | None = None
    trunk_group: int | None = None

    @property
    def link_up(self) -> bool | None:
        """``True`` with link, ``False`` on "Link Down", ``None`` if unknown."""
        if self.speed_actual == PortSpeed.UNKNOWN:
            return None
        return self.speed_actual != PortSpeed.LINK_DOWN

    @property
    def status_label(self) -> str:
        return _bool_label(self.enabled, PORT_STATE_LABELS)

    @property
    def flow_control_configured_label(self) -> str:
        return _bool_label(self.flow_control_configured, FLOW_CONTROL_LABELS)

    @property
    def flow_control_actual_label(self) -> str:
        return _bool_label(self.flow_control_actual, FLOW_CONTROL_LABELS)

    @property
    def trunk_label(self) -> str:
        return f"LAG{self.trunk_group}" if self.trunk_group else ""

    def to_dict(self) -> dict[str, object]:
        """Flat, label-rendered view used for event payloads."""
        return {
            "port": self.port_number,
            "status": self.status_label,
            "speed_config": self.speed_configured.label,
            "speed_actual": self.speed_actual.label,
            "flow_control_config": self.flow_control_configured_label,
            "flow_control_actual": self.flow_control_actual_label,
            "trunk": self.trunk_label,
        }


@dataclass(frozen=True)
class PortChange:
    """Difference for one port between two :class:`PortRecord` snapshots.

    Attributes:
        port_number: 1-based port number.
        before: Record from the older snapshot, ``None`` if the port is new.
        after: Record from the newer snapshot, ``None`` if the port vanished.
        fields: Names of the :class:`PortRecord` fields that differ.
    """

    port_number: int
    before: PortRecord | None
    after: PortRecord | None
    fields: tuple[str, ...] = ()
