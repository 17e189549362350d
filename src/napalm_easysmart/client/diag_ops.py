"""Cable diagnostic trigger for Easy Smart switches.

Payload (Cable Test page, ports 1 and 3):

    GET /cable_diag_get.cgi?chk_1=1^&chk_3=3^&Apply=Apply

The reply embeds ``cablestate`` / ``cablelength`` arrays for every port;
ports not part of the run report state ``-1``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from napalm_easysmart.client.session import EasySmartSession, suffixed
from napalm_easysmart.client.validation import validate_ports
from napalm_easysmart.model.cable import CablePortDiagnostic
from napalm_easysmart.parser.cable import parse_cable_diagnostics
from napalm_easysmart.vendor.easysmart.endpoints import CABLE_DIAGNOSTIC

logger = logging.getLogger(__name__)


def run_cable_diagnostics(
    session: EasySmartSession,
    ports: Iterable[int],
) -> list[CablePortDiagnostic]:
    """Run a cable test on *ports* and return the parsed per-port results.

    Args:
        session: Active authenticated session.
        ports: Ports to test (1..48, non-empty, no duplicates).

    Returns:
        One :class:`CablePortDiagnostic` per port the switch reported,
        including untested ports.

    Raises:
        EasySmartValidationError: On invalid input (no request sent).
    """
    selected = validate_ports(ports)
    pairs = build_cable_query(selected)

    logger.debug("Running cable diagnostics on ports %s", selected)
    body = session.send_query(CABLE_DIAGNOSTIC, pairs)
    results = parse_cable_diagnostics(body)
    logger.info(
        "Cable diagnostics on %s: %d fault(s)",
        selected, sum(1 for r in results if r.has_fault),
    )
    return results


def build_cable_query(ports: Iterable[int]) -> list[tuple[str, str]]:
    pairs = [(f"chk_{p}", suffixed(p)) for p in validate_ports(ports)]
    pairs.append(("Apply", "Apply"))
    return pairs
