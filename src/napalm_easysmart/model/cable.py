"""Typed models for cable diagnostics (cable_diag_get.cgi)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from napalm_easysmart.vendor.easysmart.mappings import (
    CABLE_STATE_LABELS,
    CABLE_STATE_OTHER_LABEL,
)


class CableState(IntEnum):
    """Cable test outcome per port.

    ``OTHER`` collects any code above 5 the firmware may report.
    """

    UNTESTED = -1
    NO_CABLE = 0
    NORMAL = 1
    OPEN = 2
    SHORT = 3
    OPEN_AND_SHORT = 4
    CROSS = 5
    OTHER = 6

    @classmethod
    def from_code(cls, code: int | None) -> CableState:
        if code is None or code < 0:
            return cls.UNTESTED
        if code > cls.CROSS:
            return cls.OTHER
        return cls(code)

    @property
    def label(self) -> str:
        return CABLE_STATE_LABELS.get(int(self), CABLE_STATE_OTHER_LABEL)


@dataclass(frozen=True)
class CablePortDiagnostic:
    """Cable test result for one port.

    Attributes:
        port_number: 1-based port number.
        state: Test outcome.
        length_meters: Measured cable length, ``None`` when not reported.
    """

    port_number: int
    state: CableState
    length_meters: int | None = None

    @property
    def healthy(self) -> bool:
        return self.state == CableState.NORMAL

    @property
    def has_fault(self) -> bool:
        """Open, short, open & short or cross cable."""
        return CableState.OPEN <= self.state <= CableState.CROSS

    @property
    def untested(self) -> bool:
        return self.state == CableState.UNTESTED

    @property
    def disconnected(self) -> bool:
        return self.state == CableState.NO_CABLE

    @property
    def description(self) -> str:
        return self.state.label

    def to_dict(self) -> dict[str, object]:
        return {
            "port": self.port_number,
            "state": int(self.state),
            "description": self.description,
            "length_m": self.length_meters,
            "healthy": self.healthy,
            "has_fault": self.has_fault,
            "untested": self.untested,
        }
