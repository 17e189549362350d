"""Extraction of values from JavaScript embedded in console pages.

The console ships its data as variables inside ``<script>`` blocks, e.g.::

    var max_port_num = 8;
    var all_info = { state:[1,1,0], spd_cfg:[1,1,1], ... };

These helpers never raise: a missing variable yields an empty list or the
caller's default, and malformed elements become ``None``.
"""

from __future__ import annotations

import re


def parse_int_token(token: str) -> int | None:
    """Convert a decimal or ``0x``-prefixed hex token, ``None`` if malformed."""
    token = token.strip()
    if not token:
        return None
    try:
        if token.lower().startswith(("0x", "-0x")):
            return int(token, 16)
        return int(token)
    except ValueError:
        return None


def split_int_list(content: str) -> list[int | None]:
    """Split the inside of a JS array literal into integers.

    Elements that are not integers are kept as ``None`` so positions stay
    aligned with the other parallel arrays.
    """
    tokens = [t for t in re.split(r"[,\s]+", content.strip()) if t]
    return [parse_int_token(t) for t in tokens]


def find_int_array(text: str, name: str) -> list[int | None]:
    """Find ``name: [..]`` or ``name = [..]`` in *text* and parse its elements.

    Args:
        text: Page body or the body of an object literal.
        name: Property / variable name (matched as a whole word).

    Returns:
        Parsed elements, ``[]`` if the array is absent or empty.
    """
    m = re.search(
        rf"(?<![\w$]){re.escape(name)}\s*[:=]\s*\[([^\]]*)\]",
        text,
    )
    if not m:
        return []
    return split_int_list(m.group(1))


def find_int_var(text: str, name: str) -> int | None:
    """Find ``var name = N;`` / ``name: N`` and return ``N``, else ``None``."""
    m = re.search(
        rf"(?<![\w$]){re.escape(name)}\s*[:=]\s*(-?\d+)",
        text,
    )
    return int(m.group(1)) if m else None


def find_object_literal(text: str, name: str) -> str | None:
    """Return the body between the braces of ``var name = { ... };``."""
    m = re.search(
        rf"(?<![\w$]){re.escape(name)}\s*=\s*\{{([\s\S]*?)\}}",
        text,
    )
    return m.group(1) if m else None
