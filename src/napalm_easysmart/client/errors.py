"""Custom exceptions for the napalm-easysmart client."""

from __future__ import annotations

from dataclasses import dataclass


class EasySmartError(Exception):
    """Base exception for all napalm-easysmart errors."""


class EasySmartConnectionError(EasySmartError):
    """Raised when the switch cannot be reached (refused, timeout, DNS, ...)."""


class EasySmartAuthError(EasySmartError):
    """Raised when the switch rejects the credentials or post-login checks fail."""


class EasySmartValidationError(EasySmartError, ValueError):
    """Raised for out-of-range arguments, before any request is sent."""


class EasySmartProtocolError(EasySmartError):
    """Raised when a reply does not look like anything the console should send."""


class EasySmartRequestError(EasySmartConnectionError):
    """Raised when a network-level error occurs (connection refused, timeout, etc.)."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url!r} failed: {cause}")


class EasySmartResponseError(EasySmartProtocolError):
    """Raised when the switch returns a non-2xx HTTP status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url!r}")


@dataclass
class EasySmartCommandError(EasySmartProtocolError):
    """Raised when a write was answered without the success marker.

    Attributes:
        endpoint: CGI path the command was sent to.
        reason: Visible text of the reply, used as the human-readable cause.
    """

    endpoint: str
    reason: str

    def __post_init__(self) -> None:
        super().__init__(
            f"Switch did not confirm {self.endpoint!r}: {self.reason or 'no success message'}"
        )
