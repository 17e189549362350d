"""Sinks for the events the session manager and monitor emit."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Event categories.
SYSTEM_INFO: str = "system_info"
PORT_INFO: str = "port_info"
PORT_CHANGE: str = "port_change"
PORT_CONFIG_CHANGE: str = "port_config_change"
VLAN_INFO: str = "vlan_info"
VLAN_CHANGE: str = "vlan_change"
CABLE_DIAGNOSTICS: str = "cable_diagnostics"
SYSTEM_COMMAND: str = "system_command"
SWITCH_CONNECTIVITY: str = "switch_connectivity"


class EventRecorder(Protocol):
    """Receives ``(category, payload)`` events; must not raise."""

    def record_event(self, category: str, payload: dict[str, Any]) -> None: ...


class NullEventRecorder:
    """Discard every event."""

    def record_event(self, category: str, payload: dict[str, Any]) -> None:
        return None


class LoggingEventRecorder:
    """Write every event to a logger at INFO."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record_event(self, category: str, payload: dict[str, Any]) -> None:
        self._log.info("event %s: %s", category, payload)


class ListEventRecorder:
    """Keep events in memory, e.g. for tests or a short-lived history view."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.events: list[tuple[str, dict[str, Any]]] = []

    def record_event(self, category: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self.events.append((category, payload))

    def categories(self) -> list[str]:
        with self._lock:
            return [c for c, _ in self.events]
