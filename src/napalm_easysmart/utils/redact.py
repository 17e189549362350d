"""Credential redaction for log and error text."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit


def redact_host(target: str) -> str:
    """Return *target* with any ``user:password@`` part and query string removed.

    Accepts a bare host (``192.168.0.1``), a host with port, or a full URL.
    Query strings are dropped too because GET-based commands may carry
    user-supplied values.

    Args:
        target: Host or URL as configured by the caller.

    Returns:
        A string safe to include in logs and exception messages.
    """
    if "://" not in target:
        host = target.rsplit("@", 1)[-1]
        return host.split("?", 1)[0]
    parts = urlsplit(target)
    netloc = parts.netloc.rsplit("@", 1)[-1]
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))
