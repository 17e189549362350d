"""Parser for the port settings page (PortSettingRpm.htm).

The page carries six parallel arrays inside one object literal plus the
port count::

    var max_port_num = 8;
    var all_info = {
        state:[1,1,1,1,1,1,1,0],
        spd_cfg:[1,1,1,1,1,1,1,1],
        spd_act:[6,0,0,5,0,0,0,0],
        fc_cfg:[0,0,0,0,0,0,0,0],
        fc_act:[0,0,0,0,0,0,0,0],
        trunk_info:[0,0,0,0,0,0,1,1]
    };
"""

from __future__ import annotations

import logging

from napalm_easysmart.model.port import PortRecord, PortSpeed
from napalm_easysmart.parser.script import find_int_array, find_int_var, find_object_literal
from napalm_easysmart.vendor.easysmart.mappings import DEFAULT_MAX_PORTS, MAX_SUPPORTED_PORTS

logger = logging.getLogger(__name__)

_ARRAY_NAMES: tuple[str, ...] = (
    "state",
    "spd_cfg",
    "spd_act",
    "fc_cfg",
    "fc_act",
    "trunk_info",
)


def parse_port_table(body: str) -> list[PortRecord]:
    """Parse the port settings page into one :class:`.PortRecord` per port.

    Ports ``1..max_port_num`` are always produced (24 if the count is
    absent, at most 48).  An array shorter than the port count leaves
    the affected fields unknown rather than failing.

    Args:
        body: Raw HTML from ``PortSettingRpm.htm``.

    Returns:
        Records ordered by port number.
    """
    max_ports = find_int_var(body, "max_port_num")
    if max_ports is None or max_ports < 0:
        logger.debug("max_port_num not found; assuming %d ports", DEFAULT_MAX_PORTS)
        max_ports = DEFAULT_MAX_PORTS
    elif max_ports > MAX_SUPPORTED_PORTS:
        logger.warning(
            "max_port_num %d exceeds %d supported ports; clamping",
            max_ports, MAX_SUPPORTED_PORTS,
        )
        max_ports = MAX_SUPPORTED_PORTS

    content = find_object_literal(body, "all_info")
    if content is None:
        logger.warning("all_info not found in port settings page; all port fields unknown")
        content = ""

    arrays = {name: find_int_array(content, name) for name in _ARRAY_NAMES}
    short = [n for n, a in arrays.items() if len(a) < max_ports]
    if content and short:
        logger.debug("Port arrays shorter than %d ports: %s", max_ports, ", ".join(short))

    return [_build_record(i, arrays) for i in range(max_ports)]


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _at(values: list[int | None], index: int) -> int | None:
    return values[index] if index < len(values) else None


def _flag(value: int | None) -> bool | None:
    return None if value is None else value != 0


def _build_record(index: int, arrays: dict[str, list[int | None]]) -> PortRecord:
    trunk = _at(arrays["trunk_info"], index)
    return PortRecord(
        port_number=index + 1,
        enabled=_flag(_at(arrays["state"], index)),
        speed_configured=PortSpeed.from_code(_at(arrays["spd_cfg"], index)),
        speed_actual=PortSpeed.from_code(_at(arrays["spd_act"], index)),
        flow_control_configured=_flag(_at(arrays["fc_cfg"], index)),
        flow_control_actual=_flag(_at(arrays["fc_act"], index)),
        trunk_group=trunk if trunk else None,
    )
