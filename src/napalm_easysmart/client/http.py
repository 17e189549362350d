"""Low-level HTTP client wrapper for Easy Smart web console endpoints."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any
from urllib.parse import urlsplit

import requests

from napalm_easysmart.client.errors import EasySmartRequestError, EasySmartResponseError
from napalm_easysmart.utils.redact import redact_host

logger = logging.getLogger(__name__)

try:
    _VERSION: str = importlib.metadata.version("napalm-easysmart")
except importlib.metadata.PackageNotFoundError:
    _VERSION = "0.0.0"

_USER_AGENT: str = f"napalm-easysmart/{_VERSION}"


def _normalise_base_url(url: str, scheme: str = "http") -> str:
    """Ensure the URL has a scheme and no trailing slash."""
    url = url.rstrip("/")
    if "://" not in url:
        url = f"{scheme}://{url}"
    return url


class EasySmartHTTP:
    """Thin :class:`requests.Session` wrapper bound to one switch.

    Owns the cookie jar (the console keeps its login in a ``SessionID``
    cookie), sends a ``User-Agent``, applies a default timeout that each
    call may override, and turns failures into :mod:`.errors` types with
    the host redacted.

    Args:
        base_url: Switch base URL, e.g. ``http://192.168.0.1``.
        timeout_s: Default request timeout in seconds.
        verify_tls: Verify TLS certificates for ``https`` targets.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 60.0,
        verify_tls: bool = False,
    ) -> None:
        self.base_url: str = _normalise_base_url(base_url)
        self.timeout_s: float = timeout_s
        self.verify_tls: bool = verify_tls
        self._session: requests.Session = requests.Session()
        self._session.headers["User-Agent"] = _USER_AGENT

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get(
        self,
        path: str,
        query: str | None = None,
        timeout_s: float | None = None,
    ) -> requests.Response:
        """GET *path*, optionally with a pre-encoded query string.

        *query* is appended verbatim (no ``?``): commands need repeated keys
        and exact percent-encoding, which ``params=`` would not preserve.

        Raises:
            EasySmartRequestError: On any transport-level failure.
            EasySmartResponseError: On a non-2xx HTTP status code.
        """
        url = f"{self.base_url}{path}?{query}" if query else self.base_url + path
        return self._request("GET", url, timeout_s)

    def post_form(
        self,
        path: str,
        data: dict[str, str] | list[tuple[str, str]] | None = None,
        timeout_s: float | None = None,
    ) -> requests.Response:
        """POST form-encoded *data* to *path*.

        *data* may be a list of pairs when a key must repeat.

        Raises:
            EasySmartRequestError: On any transport-level failure.
            EasySmartResponseError: On a non-2xx HTTP status code.
        """
        return self._request("POST", self.base_url + path, timeout_s, data=data)

    # ------------------------------------------------------------------
    # Cookies
    # ------------------------------------------------------------------

    def get_cookie(self, name: str) -> str | None:
        """Return the value of cookie *name* from the jar, if present."""
        # .get() raises on duplicates; the device and set_cookie() may both
        # have stored one. Last one wins.
        value: str | None = None
        for cookie in self._session.cookies:
            if cookie.name == name:
                value = cookie.value
        return value

    def set_cookie(self, name: str, value: str) -> None:
        """Place cookie *name* in the jar, scoped to the switch host."""
        host = urlsplit(self.base_url).hostname or ""
        self._session.cookies.set(name, value, domain=host, path="/")

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> EasySmartHTTP:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        url: str,
        timeout_s: float | None,
        **kwargs: Any,
    ) -> requests.Response:
        timeout = self.timeout_s if timeout_s is None else timeout_s
        try:
            resp = self._session.request(
                method, url, timeout=timeout, verify=self.verify_tls, **kwargs
            )
        except requests.exceptions.RequestException as exc:
            raise EasySmartRequestError(redact_host(url), exc) from exc
        logger.debug("%s %s -> HTTP %d", method, redact_host(url), resp.status_code)
        if not resp.ok:
            raise EasySmartResponseError(resp.status_code, redact_host(resp.url))
        return resp
