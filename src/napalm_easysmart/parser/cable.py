"""Parser for cable diagnostic results (cable_diag_get.cgi)."""

from __future__ import annotations

import logging

from napalm_easysmart.model.cable import CablePortDiagnostic, CableState
from napalm_easysmart.parser.script import find_int_array, find_int_var
from napalm_easysmart.vendor.easysmart.mappings import DEFAULT_MAX_PORTS

logger = logging.getLogger(__name__)


def parse_cable_diagnostics(body: str) -> list[CablePortDiagnostic]:
    """Parse ``cablestate`` / ``cablelength`` / ``maxPort`` from a result page.

    A state of ``-1`` (port not part of this test run) maps to
    :attr:`.CableState.UNTESTED`; a length of ``-1`` or a missing length
    maps to ``None``.

    Args:
        body: Raw HTML returned by ``cable_diag_get.cgi``.

    Returns:
        One entry per reported port, at most ``maxPort`` (24 if absent).
    """
    states = find_int_array(body, "cablestate")
    lengths = find_int_array(body, "cablelength")
    max_ports = find_int_var(body, "maxPort")
    if max_ports is None or max_ports < 0:
        max_ports = DEFAULT_MAX_PORTS

    if not states:
        logger.warning("cablestate not found in cable diagnostic reply")

    results: list[CablePortDiagnostic] = []
    for index in range(min(max_ports, len(states))):
        length = lengths[index] if index < len(lengths) else None
        results.append(
            CablePortDiagnostic(
                port_number=index + 1,
                state=CableState.from_code(states[index]),
                length_meters=length if length is not None and length >= 0 else None,
            )
        )
    return results
