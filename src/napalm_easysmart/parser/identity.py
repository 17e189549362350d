"""Parser for the system information page (SystemInfoRpm.htm).

Firmware revisions publish the same seven values in two layouts::

    var info_ds = new Array("TL-SG108E", "AA:BB:CC:00:11:22", ...);
    var info_ds = { descriStr:["TL-SG108E"], macStr:["AA:BB:CC:00:11:22"], ... };

Layouts are tried in a fixed order; when none matches, the body is
returned verbatim as :class:`.RawIdentity`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from napalm_easysmart.model.identity import DeviceIdentity, IdentityResult, RawIdentity
from napalm_easysmart.parser.script import find_object_literal

logger = logging.getLogger(__name__)

_QUOTED = r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'"
_QUOTED_RE: re.Pattern[str] = re.compile(_QUOTED)

# ``info_ds = new Array(...)`` or ``info_ds = [...]``
_INFO_ARRAY_RE: re.Pattern[str] = re.compile(
    rf"info_ds\s*=\s*(?:new\s+Array\s*\(|\[)\s*((?:{_QUOTED})(?:\s*,\s*(?:{_QUOTED}))*)\s*[)\]]"
)

# Any array literal of at least seven quoted strings.
_BARE_ARRAY_RE: re.Pattern[str] = re.compile(
    rf"(?:new\s+Array\s*\(|\[)\s*((?:{_QUOTED})(?:\s*,\s*(?:{_QUOTED})){{6,}})\s*[)\]]"
)

# Object-literal keys in field order.
_OBJECT_KEYS: tuple[str, ...] = (
    "descriStr",
    "macStr",
    "ipStr",
    "netmaskStr",
    "gatewayStr",
    "firmwareStr",
    "hardwareStr",
)

_FIELD_COUNT: int = 7


def parse_identity(body: str) -> IdentityResult:
    """Parse the system information page.

    Args:
        body: Raw HTML from ``SystemInfoRpm.htm``.

    Returns:
        :class:`.DeviceIdentity` if a known layout matched, otherwise
        :class:`.RawIdentity` holding *body* unchanged.
    """
    for name, strategy in _STRATEGIES:
        identity = strategy(body)
        if identity is not None:
            if name != _STRATEGIES[0][0]:
                logger.info("System info parsed with fallback layout %r", name)
            return identity
    logger.warning(
        "System info page matched no known layout (%d bytes); returning raw body",
        len(body),
    )
    return RawIdentity(body=body)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def _from_array_literal(body: str) -> DeviceIdentity | None:
    """Seven quoted values in fixed order inside an array literal."""
    m = _INFO_ARRAY_RE.search(body) or _BARE_ARRAY_RE.search(body)
    if not m:
        return None
    values = [_unquote(v) for v in _QUOTED_RE.findall(m.group(1))]
    if len(values) < _FIELD_COUNT:
        logger.debug("info_ds array has %d fields, expected %d", len(values), _FIELD_COUNT)
        return None
    return DeviceIdentity(*(v.strip() for v in values[:_FIELD_COUNT]))


def _from_object_literal(body: str) -> DeviceIdentity | None:
    """``key:["value"]`` pairs inside ``info_ds = {...}``; absent keys become ``""``."""
    content = find_object_literal(body, "info_ds")
    if content is None:
        return None
    found: dict[str, str] = {}
    for key in _OBJECT_KEYS:
        m = re.search(rf"{key}\s*:\s*\[\s*\"([^\"]*)\"\s*\]", content)
        if m:
            found[key] = m.group(1).strip()
    if not found:
        return None
    return DeviceIdentity(*(found.get(key, "") for key in _OBJECT_KEYS))


_STRATEGIES: tuple[tuple[str, Callable[[str], DeviceIdentity | None]], ...] = (
    ("array", _from_array_literal),
    ("object", _from_object_literal),
)


def _unquote(token: str) -> str:
    inner = token[1:-1]
    return re.sub(r"\\(.)", r"\1", inner)
