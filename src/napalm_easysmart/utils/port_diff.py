"""Port snapshot comparison.

Compares two consecutive port tables (as returned by the
PortSettingRpm.htm parser) and reports which ports changed and how, so
callers can record one event per changed port instead of the whole table.
"""

from __future__ import annotations

from napalm_easysmart.model.port import PortChange, PortRecord

# PortRecord fields compared between snapshots, in report order.
COMPARED_FIELDS: tuple[str, ...] = (
    "enabled",
    "speed_configured",
    "speed_actual",
    "flow_control_configured",
    "flow_control_actual",
    "trunk_group",
)


def diff_ports(
    previous: list[PortRecord],
    current: list[PortRecord],
) -> list[PortChange]:
    """Return the per-port differences between two snapshots.

    Matches ports by :attr:`~.PortRecord.port_number`.  A port present in
    only one snapshot is reported with ``before`` or ``after`` set to
    ``None`` and every compared field listed.

    Args:
        previous: Older snapshot.
        current: Newer snapshot.

    Returns:
        Changes sorted ascending by port number; empty if nothing changed.
    """
    before_by_port: dict[int, PortRecord] = {r.port_number: r for r in previous}
    after_by_port: dict[int, PortRecord] = {r.port_number: r for r in current}

    changes: list[PortChange] = []
    for port in sorted(before_by_port.keys() | after_by_port.keys()):
        before = before_by_port.get(port)
        after = after_by_port.get(port)
        if before is None or after is None:
            changes.append(PortChange(port, before, after, COMPARED_FIELDS))
            continue
        changed = _changed_fields(before, after)
        if changed:
            changes.append(PortChange(port, before, after, changed))
    return changes


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _changed_fields(before: PortRecord, after: PortRecord) -> tuple[str, ...]:
    return tuple(
        name for name in COMPARED_FIELDS if getattr(before, name) != getattr(after, name)
    )
