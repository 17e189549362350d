"""Authenticated web-console session for Easy Smart switches."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import quote

from napalm_easysmart.client.errors import (
    EasySmartAuthError,
    EasySmartCommandError,
    EasySmartConnectionError,
    EasySmartError,
    EasySmartRequestError,
    EasySmartResponseError,
)
from napalm_easysmart.client.http import EasySmartHTTP, _normalise_base_url
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.parser.html import page_text
from napalm_easysmart.utils.redact import redact_host
from napalm_easysmart.vendor.easysmart.endpoints import (
    LOGIN,
    LOGIN_MARKER,
    ROOT,
    SESSION_COOKIE,
    SUCCESS_MARKER,
    SYSTEM_INFO,
    VALUE_SUFFIX,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EasySmartCredentials:
    """Immutable target + credential triple for one switch.

    Args:
        host: Switch IP address, hostname or base URL.
        username: Login username.
        password: Login password (kept out of ``repr``).
    """

    host: str
    username: str
    password: str = field(repr=False)


def suffixed(value: object) -> str:
    """Return *value* as a string with the firmware's trailing ``^`` delimiter."""
    return f"{value}{VALUE_SUFFIX}"


def build_query(pairs: Iterable[tuple[str, str]]) -> str:
    """Encode *pairs* as a query string, keeping repeated keys and order.

    ``^`` is percent-encoded like every other reserved character, so the
    resulting string passes through :mod:`requests` unchanged.
    """
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)


def check_success(endpoint: str, body: str) -> None:
    """Raise unless *body* carries the console's success tip.

    Raises:
        EasySmartCommandError: If the marker is absent; the visible page
            text becomes the reason.
    """
    if SUCCESS_MARKER not in body:
        raise EasySmartCommandError(endpoint=endpoint, reason=page_text(body))


class EasySmartSession:
    """Cookie-based web session to one Easy Smart switch.

    Wraps :class:`.EasySmartHTTP` and adds:
    - Login through the console's own form (``logon.cgi``).
    - Post-login verification against the system information page.
    - Access to the ``SessionID`` cookie so it can be persisted and
      injected into a later session.
    - Raw page fetches, hand-built GET commands and form POSTs.

    No request is retried here; retry policy belongs to
    :class:`~napalm_easysmart.manager.SessionManager`.

    Args:
        credentials: Target host and login credentials.
        settings: Timeouts and transport options.
    """

    def __init__(
        self,
        credentials: EasySmartCredentials,
        settings: SwitchSettings | None = None,
    ) -> None:
        self._settings: SwitchSettings = settings or SwitchSettings()
        self._credentials: EasySmartCredentials = credentials
        self._http: EasySmartHTTP = EasySmartHTTP(
            base_url=_normalise_base_url(credentials.host, self._settings.scheme),
            timeout_s=self._settings.connection_timeout,
            verify_tls=self._settings.verify_tls,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def display_host(self) -> str:
        """Host as it may appear in logs (no credentials, no query)."""
        return redact_host(self._http.base_url)

    @property
    def credentials(self) -> EasySmartCredentials:
        return self._credentials

    @property
    def session_cookie(self) -> str | None:
        """Current ``SessionID`` cookie value, ``None`` before login."""
        return self._http.get_cookie(SESSION_COOKIE)

    def set_session_cookie(self, value: str) -> None:
        """Inject a previously issued ``SessionID`` cookie."""
        self._http.set_cookie(SESSION_COOKIE, value)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def test_connectivity(self) -> bool:
        """Return ``True`` if ``GET /`` answers 2xx within the test timeout."""
        try:
            self._http.get(ROOT, timeout_s=self._settings.test_connection_timeout)
        except EasySmartError as exc:
            logger.debug("Connectivity test to %s failed: %s", self.display_host, exc)
            return False
        return True

    def login(self) -> None:
        """Authenticate to the switch.

        Loads the root page; if it is the login form, posts the credentials
        to ``logon.cgi``.  Either way the session is then verified by loading
        the system information page.

        Raises:
            EasySmartConnectionError: If the switch cannot be reached.
            EasySmartAuthError: If the verification page is refused after the
                credentials were submitted.
        """
        try:
            root = self._http.get(ROOT, timeout_s=self._settings.login_timeout)
        except EasySmartRequestError as exc:
            raise EasySmartConnectionError(
                f"Cannot connect to switch at {self.display_host}: {exc.cause}"
            ) from exc
        except EasySmartResponseError as exc:
            raise EasySmartConnectionError(
                f"Switch at {self.display_host} answered HTTP {exc.status_code} for its root page"
            ) from exc

        submitted = False
        if LOGIN_MARKER in root.text:
            logger.debug("Login form found at %s; submitting credentials", self.display_host)
            self._post_credentials()
            submitted = True
        else:
            logger.debug("No login form at %s; session already valid", self.display_host)

        self._verify_login(submitted)
        logger.info("Logged in to %s as %s", self.display_host, self._credentials.username)

    def is_logged_in(self) -> bool:
        """Liveness check: can an auth-only page be loaded?  Never raises."""
        try:
            resp = self._http.get(SYSTEM_INFO, timeout_s=self._settings.login_timeout)
        except EasySmartError as exc:
            logger.debug("Session liveness check to %s failed: %s", self.display_host, exc)
            return False
        return LOGIN_MARKER not in resp.text

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get_page(self, path: str) -> str:
        """GET a console page and return its body.

        Raises:
            EasySmartRequestError: On transport failure.
            EasySmartResponseError: On a non-2xx status.
        """
        return self._http.get(path).text

    def send_query(self, path: str, pairs: Iterable[tuple[str, str]]) -> str:
        """Issue a GET command with a hand-built query string.

        Args:
            path: CGI path relative to the switch base URL.
            pairs: Ordered ``(key, value)`` pairs; keys may repeat and values
                must already carry their ``^`` suffix where the firmware
                expects one.

        Returns:
            Response body.
        """
        query = build_query(pairs)
        logger.debug("GET %s?%s", path, query)
        return self._http.get(path, query=query).text

    def post_form(self, path: str, data: dict[str, str]) -> str:
        """POST form fields and return the response body (2xx enforced)."""
        logger.debug("POST %s fields=%s", path, sorted(data))
        return self._http.post_form(path, data=data).text

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._http.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _post_credentials(self) -> None:
        form = {
            "username": self._credentials.username,
            "password": self._credentials.password,
            "logon": "Login",
        }
        try:
            self._http.post_form(LOGIN, data=form, timeout_s=self._settings.login_timeout)
        except EasySmartRequestError as exc:
            raise EasySmartConnectionError(
                f"Connection to {self.display_host} lost while logging in: {exc.cause}"
            ) from exc
        except EasySmartResponseError as exc:
            # Some firmware answers the POST with an error status yet sets the
            # cookie; the verification below decides.
            logger.debug("Login POST returned HTTP %d; verifying anyway", exc.status_code)

    def _verify_login(self, submitted: bool) -> None:
        try:
            resp = self._http.get(SYSTEM_INFO, timeout_s=self._settings.login_timeout)
        except EasySmartRequestError as exc:
            raise EasySmartConnectionError(
                f"Connection to {self.display_host} lost while verifying login: {exc.cause}"
            ) from exc
        except EasySmartResponseError as exc:
            raise EasySmartAuthError(
                f"Login to {self.display_host} failed (HTTP {exc.status_code}); "
                "check username and password"
            ) from exc
        if submitted and LOGIN_MARKER in resp.text:
            raise EasySmartAuthError(
                f"Login to {self.display_host} failed; the switch returned the login form again"
            )
