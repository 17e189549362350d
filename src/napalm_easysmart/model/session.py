"""Persisted web-session state."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, replace

from napalm_easysmart.client.session import EasySmartCredentials


@dataclass(frozen=True)
class DeviceSession:
    """Credentials plus the last session cookie issued for them.

    Stored by a :class:`~napalm_easysmart.storage.SessionStore` so a restarted
    process can resume without logging in again.  A cookie is only ever
    kept next to the credentials it was issued for: :meth:`for_credentials`
    starts a fresh, cookie-less record.

    Attributes:
        host: Switch host or URL.
        username: Login username.
        password: Login password.
        session_cookie: Value of the ``SessionID`` cookie, if any.
        cookie_expires_at: Assumed expiry of :attr:`session_cookie` (UTC).
    """

    host: str
    username: str
    password: str
    session_cookie: str | None = None
    cookie_expires_at: datetime.datetime | None = None

    @classmethod
    def for_credentials(cls, credentials: EasySmartCredentials) -> DeviceSession:
        return cls(
            host=credentials.host,
            username=credentials.username,
            password=credentials.password,
        )

    @property
    def credentials(self) -> EasySmartCredentials:
        return EasySmartCredentials(
            host=self.host, username=self.username, password=self.password
        )

    def matches(self, credentials: EasySmartCredentials) -> bool:
        """``True`` if host, username and password all equal *credentials*."""
        return (
            self.host == credentials.host
            and self.username == credentials.username
            and self.password == credentials.password
        )

    def cookie_valid(self, now: datetime.datetime) -> bool:
        """``True`` if a cookie is stored and has not yet expired at *now*."""
        return (
            self.session_cookie is not None
            and self.cookie_expires_at is not None
            and now < self.cookie_expires_at
        )

    def with_cookie(
        self,
        cookie: str | None,
        expires_at: datetime.datetime | None,
    ) -> DeviceSession:
        return replace(self, session_cookie=cookie, cookie_expires_at=expires_at)

    def to_dict(self) -> dict[str, object]:
        return {
            "host": self.host,
            "username": self.username,
            "password": self.password,
            "session_cookie": self.session_cookie,
            "cookie_expires_at": (
                self.cookie_expires_at.isoformat() if self.cookie_expires_at else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> DeviceSession:
        expires_raw = data.get("cookie_expires_at")
        expires: datetime.datetime | None = None
        if isinstance(expires_raw, str) and expires_raw:
            expires = datetime.datetime.fromisoformat(expires_raw)
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=datetime.timezone.utc)
        cookie = data.get("session_cookie")
        return cls(
            host=str(data["host"]),
            username=str(data["username"]),
            password=str(data["password"]),
            session_cookie=str(cookie) if cookie else None,
            cookie_expires_at=expires,
        )
