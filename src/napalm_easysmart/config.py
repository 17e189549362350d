"""Runtime settings for the Easy Smart adapter, session manager and monitor."""

from __future__ import annotations

import datetime
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from napalm_easysmart.client.errors import EasySmartValidationError

ENV_PREFIX: str = "EASYSMART_"

_DURATION_FIELDS: frozenset[str] = frozenset(
    {"cookie_lifetime", "poll_interval", "renewal_interval", "reconnect_after"}
)
_TIMEOUT_FIELDS: frozenset[str] = frozenset(
    {"connection_timeout", "login_timeout", "test_connection_timeout"}
)
_TRUE_STRINGS: frozenset[str] = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS: frozenset[str] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class SwitchSettings:
    """Timeouts, lifetimes and transport options.

    Timeouts are in seconds; lifetimes and intervals are
    :class:`datetime.timedelta`.  Both :meth:`from_optional_args` and
    :meth:`from_env` accept durations as seconds.

    Attributes:
        connection_timeout: Default per-request timeout.
        login_timeout: Timeout for login and session liveness checks.
        test_connection_timeout: Timeout for the reachability check.
        cookie_lifetime: How long a ``SessionID`` is assumed to stay valid.
        poll_interval: Period of the monitor's status poll.
        renewal_interval: Period of the monitor's renewal check.
        reconnect_after: Minimum gap between reconnect attempts while the
            switch is unreachable.
        verify_tls: Verify TLS certificates for ``https`` targets.
        scheme: URL scheme used when the host has none.
    """

    connection_timeout: float = 60.0
    login_timeout: float = 10.0
    test_connection_timeout: float = 5.0
    cookie_lifetime: datetime.timedelta = datetime.timedelta(minutes=30)
    poll_interval: datetime.timedelta = datetime.timedelta(seconds=30)
    renewal_interval: datetime.timedelta = datetime.timedelta(minutes=10)
    reconnect_after: datetime.timedelta = datetime.timedelta(minutes=5)
    verify_tls: bool = False
    scheme: str = "http"

    def __post_init__(self) -> None:
        for name in _TIMEOUT_FIELDS:
            if getattr(self, name) <= 0:
                raise EasySmartValidationError(f"{name} must be positive")
        for name in _DURATION_FIELDS:
            if getattr(self, name) <= datetime.timedelta(0):
                raise EasySmartValidationError(f"{name} must be positive")
        if self.scheme not in ("http", "https"):
            raise EasySmartValidationError(
                f"scheme must be 'http' or 'https', got {self.scheme!r}"
            )

    @property
    def renewal_threshold(self) -> datetime.timedelta:
        """Elapsed time after which the monitor renews the cookie.

        The renewal check only runs every :attr:`renewal_interval`, so the
        threshold sits half an interval before 75 % of the lifetime: the
        check nearest to that mark is the one that renews.  Never negative.
        """
        threshold = self.cookie_lifetime * 0.75 - self.renewal_interval / 2
        return max(threshold, datetime.timedelta(0))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_optional_args(
        cls,
        optional_args: Mapping[str, Any] | None,
        timeout: float | None = None,
    ) -> SwitchSettings:
        """Build settings from a NAPALM ``optional_args`` dict.

        Unknown keys are ignored so the same dict may carry options for
        other layers (e.g. ``port``).

        Args:
            optional_args: Driver options; durations are in seconds.
            timeout: NAPALM ``timeout`` argument, used as
                ``connection_timeout`` unless that key is given explicitly.
        """
        values: dict[str, Any] = {}
        if timeout is not None:
            values["connection_timeout"] = timeout
        for key, raw in (optional_args or {}).items():
            if key in _known_fields():
                values[key] = raw
        return cls(**_coerce(values))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SwitchSettings:
        """Build settings from ``EASYSMART_*`` environment variables.

        E.g. ``EASYSMART_LOGIN_TIMEOUT=15`` or ``EASYSMART_VERIFY_TLS=true``.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in _known_fields():
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**_coerce(values))


def _known_fields() -> set[str]:
    return {f.name for f in fields(SwitchSettings)}


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, raw in values.items():
        try:
            if name in _DURATION_FIELDS:
                out[name] = (
                    raw
                    if isinstance(raw, datetime.timedelta)
                    else datetime.timedelta(seconds=float(raw))
                )
            elif name in _TIMEOUT_FIELDS:
                out[name] = float(raw)
            elif name == "verify_tls":
                out[name] = _to_bool(raw)
            else:
                out[name] = str(raw).lower()
        except (TypeError, ValueError) as exc:
            raise EasySmartValidationError(f"Invalid value for {name}: {raw!r}") from exc
    return out


def _to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {raw!r}")
