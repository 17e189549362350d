"""Persistence of the device session between process restarts."""

from __future__ import annotations

import json
import logging
import os
import pathlib
import threading
from typing import Protocol

from napalm_easysmart.client.errors import EasySmartError
from napalm_easysmart.model.session import DeviceSession

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Load/save the single persisted :class:`DeviceSession`."""

    def load(self) -> DeviceSession | None: ...

    def save(self, session: DeviceSession) -> None: ...


class MemorySessionStore:
    """In-process store; nothing survives a restart."""

    def __init__(self, session: DeviceSession | None = None) -> None:
        self._session = session
        self._lock = threading.Lock()
        self.save_count: int = 0

    def load(self) -> DeviceSession | None:
        with self._lock:
            return self._session

    def save(self, session: DeviceSession) -> None:
        with self._lock:
            self._session = session
            self.save_count += 1


class JsonFileSessionStore:
    """Store the session as a JSON file readable only by its owner.

    The file holds the switch password in clear text, so it is written
    with mode ``0600`` and replaced atomically.

    Args:
        path: Location of the JSON file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = pathlib.Path(path)
        self._lock = threading.Lock()

    def load(self) -> DeviceSession | None:
        """Return the stored session, ``None`` if the file does not exist.

        Raises:
            EasySmartError: If the file exists but cannot be decoded.
        """
        with self._lock:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
        try:
            return DeviceSession.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            raise EasySmartError(f"Corrupt session file {self.path}: {exc}") from exc

    def save(self, session: DeviceSession) -> None:
        payload = json.dumps(session.to_dict(), indent=2)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        logger.debug("Session for %s saved to %s", session.host, self.path)
