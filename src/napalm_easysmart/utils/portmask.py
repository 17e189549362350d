"""VLAN membership bitmask helpers.

The console reports VLAN membership as one integer per VLAN where bit
``n - 1`` set means port ``n`` is a member.  The compact textual form
(``"1-3,5"``) produced here is the same one accepted back by
:func:`parse_port_range`, so the two directions round-trip exactly for any
mask that fits in :data:`PORT_MASK_BITS` bits.
"""

from __future__ import annotations

from collections.abc import Iterable

from napalm_easysmart.vendor.easysmart.mappings import PORT_MASK_BITS


def decode_port_range(mask: int) -> str:
    """Render the set bits of *mask* as a compact port range string.

    Scans bit positions 1..48; each contiguous run of members becomes
    ``"n"`` (single port) or ``"start-end"``, and runs are comma-joined.

    Args:
        mask: Membership bitmask as reported by the switch.

    Returns:
        E.g. ``"1,3"`` for ``0x05`` or ``"1-4,8"`` for ``0x8F``; ``""`` when
        no port in range is set.
    """
    runs: list[str] = []
    start: int | None = None
    for port in range(1, PORT_MASK_BITS + 2):
        is_member = port <= PORT_MASK_BITS and bool(mask >> (port - 1) & 1)
        if is_member and start is None:
            start = port
        elif not is_member and start is not None:
            end = port - 1
            runs.append(str(start) if start == end else f"{start}-{end}")
            start = None
    return ",".join(runs)


def mask_to_ports(mask: int) -> list[int]:
    """Return the sorted 1-based port numbers whose bits are set in *mask*."""
    return [p for p in range(1, PORT_MASK_BITS + 1) if mask >> (p - 1) & 1]


def ports_to_mask(ports: Iterable[int]) -> int:
    """Build a membership bitmask from 1-based port numbers.

    Raises:
        ValueError: If a port is outside 1..48.
    """
    mask = 0
    for port in ports:
        if not 1 <= port <= PORT_MASK_BITS:
            raise ValueError(f"port {port} outside 1..{PORT_MASK_BITS}")
        mask |= 1 << (port - 1)
    return mask


def parse_port_range(text: str) -> list[int]:
    """Expand a compact range string (``"1-3,5"``) into sorted port numbers.

    Blank segments and tokens that are not integers or ``a-b`` ranges are
    ignored; reversed ranges (``"5-3"``) are accepted.

    Args:
        text: Range string as produced by :func:`decode_port_range`.

    Returns:
        Sorted, de-duplicated list of port numbers.
    """
    ports: set[int] = set()
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        if "-" in token:
            lo_text, _, hi_text = token.partition("-")
            if not (lo_text.strip().isdigit() and hi_text.strip().isdigit()):
                continue
            lo, hi = sorted((int(lo_text), int(hi_text)))
            ports.update(range(lo, hi + 1))
        elif token.isdigit():
            ports.add(int(token))
    return sorted(ports)
