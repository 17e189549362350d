"""Background keep-alive for the managed switch session.

Two daemon threads drive :class:`BackgroundMonitor`:

- the *poll* loop loads identity and port pages every ``poll_interval``,
  which keeps the web session busy and detects unreachability;
- the *renewal* loop checks every ``renewal_interval`` whether the session
  cookie is old enough to be renewed.

Each tick is guarded by its own non-blocking lock, so a slow tick is
skipped rather than stacked.  No exception ever leaves a tick: failures
become a state flip, a log entry and, when reachability changes, a
``switch_connectivity`` event.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import threading
from collections.abc import Callable

from napalm_easysmart.client.errors import EasySmartError
from napalm_easysmart.events import SWITCH_CONNECTIVITY, EventRecorder
from napalm_easysmart.manager import Clock, SessionManager, utcnow

logger = logging.getLogger(__name__)

# Bounded wait for the loops to notice a stop request.
_DEFAULT_JOIN_TIMEOUT_S: float = 5.0


@dataclasses.dataclass(frozen=True)
class MonitorStatus:
    """Point-in-time view of the monitor.

    Attributes:
        authenticated: ``True`` while the last poll or renewal succeeded.
        last_successful_connection_at: Time of the last successful poll.
        last_cookie_renewal_at: Time of the last login or renewal.
    """

    authenticated: bool
    last_successful_connection_at: datetime.datetime | None
    last_cookie_renewal_at: datetime.datetime | None


class BackgroundMonitor:
    """Poll the switch and renew its session cookie in the background.

    Args:
        manager: Session manager holding the stored credentials.
        recorder: Receives ``switch_connectivity`` events; defaults to the
            manager's recorder.
        clock: Returns the current aware UTC time; replaceable for tests.
    """

    def __init__(
        self,
        manager: SessionManager,
        recorder: EventRecorder | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._manager = manager
        self._recorder: EventRecorder = recorder or manager.recorder
        self._settings = manager.settings
        self._clock: Clock = clock or utcnow

        self._state_lock = threading.Lock()
        self._poll_lock = threading.Lock()
        self._renew_lock = threading.Lock()
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

        self._authenticated = False
        self._last_success: datetime.datetime | None = None
        self._last_renewal: datetime.datetime | None = None
        self._last_reconnect_attempt: datetime.datetime | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        """Authenticate from the stored credentials and start both loops.

        A failed initial authentication is logged; the poll loop keeps
        trying to reconnect.
        """
        if self.running:
            logger.debug("Monitor already running")
            return
        self._stop = threading.Event()
        self._connect_initial()
        self._threads = [
            self._spawn("easysmart-poll", self._settings.poll_interval, self.poll_once),
            self._spawn("easysmart-renew", self._settings.renewal_interval, self.renew_once),
        ]
        logger.info(
            "Monitor started (poll every %s, renewal check every %s)",
            self._settings.poll_interval, self._settings.renewal_interval,
        )

    def stop(self, timeout_s: float = _DEFAULT_JOIN_TIMEOUT_S) -> None:
        """Signal both loops to exit and wait up to *timeout_s* for each.

        An in-flight request is not interrupted; its thread is a daemon
        and ends on its own.
        """
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout_s)
            if thread.is_alive():
                logger.warning("%s still busy after %.1fs; leaving it", thread.name, timeout_s)
        self._threads = []
        logger.info("Monitor stopped")

    def status(self) -> MonitorStatus:
        with self._state_lock:
            return MonitorStatus(
                authenticated=self._authenticated,
                last_successful_connection_at=self._last_success,
                last_cookie_renewal_at=self._last_renewal,
            )

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def poll_once(self) -> None:
        """Run one status poll; skipped if the previous poll is still running."""
        if not self._poll_lock.acquire(blocking=False):
            logger.debug("Previous poll still running; skipping")
            return
        try:
            self._poll()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Monitor poll failed")
            self._set_reachable(False, reason=str(exc))
        finally:
            self._poll_lock.release()

    def renew_once(self) -> None:
        """Run one renewal check; skipped if the previous one is still running."""
        if not self._renew_lock.acquire(blocking=False):
            logger.debug("Previous renewal still running; skipping")
            return
        try:
            self._renew()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Session renewal failed")
            self._set_reachable(False, reason=str(exc))
        finally:
            self._renew_lock.release()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn(
        self,
        name: str,
        interval: datetime.timedelta,
        tick: Callable[[], None],
    ) -> threading.Thread:
        stop = self._stop

        def run() -> None:
            while not stop.wait(interval.total_seconds()):
                tick()

        thread = threading.Thread(target=run, name=name, daemon=True)
        thread.start()
        return thread

    def _connect_initial(self) -> None:
        now = self._clock()
        self._last_reconnect_attempt = now
        try:
            self._manager.renew()
        except EasySmartError as exc:
            logger.warning("Initial connection to switch failed: %s", exc)
            return
        with self._state_lock:
            self._last_renewal = now
        self._set_reachable(True, now=now)

    def _poll(self) -> None:
        now = self._clock()
        if not self.status().authenticated:
            self._reconnect(now)
            return
        try:
            self._manager.get_identity()
            self._manager.get_ports()
        except EasySmartError as exc:
            logger.warning("Switch poll failed: %s", exc)
            self._set_reachable(False, reason=str(exc))
            return
        self._set_reachable(True, now=now)

    def _reconnect(self, now: datetime.datetime) -> None:
        last = self._last_reconnect_attempt
        if last is not None and now - last < self._settings.reconnect_after:
            logger.debug("Not authenticated; next reconnect after %s", last + self._settings.reconnect_after)
            return
        self._last_reconnect_attempt = now

        stored = self._manager.stored_session
        if stored is None:
            logger.debug("No stored credentials; nothing to reconnect")
            return
        try:
            self._manager.ensure_ready(stored.credentials)
        except EasySmartError as exc:
            logger.warning("Reconnect to switch failed: %s", exc)
            return
        with self._state_lock:
            self._last_renewal = now
        self._set_reachable(True, now=now)

    def _renew(self) -> None:
        now = self._clock()
        with self._state_lock:
            authenticated = self._authenticated
            last = self._last_renewal
        if not authenticated:
            return
        if last is not None and now - last < self._settings.renewal_threshold:
            return
        try:
            self._manager.renew()
        except EasySmartError as exc:
            logger.warning("Session renewal failed: %s", exc)
            self._set_reachable(False, reason=str(exc))
            return
        with self._state_lock:
            self._last_renewal = now
        logger.info("Session cookie renewed")

    def _set_reachable(
        self,
        reachable: bool,
        now: datetime.datetime | None = None,
        reason: str = "",
    ) -> None:
        with self._state_lock:
            flipped = reachable != self._authenticated
            self._authenticated = reachable
            if reachable and now is not None:
                self._last_success = now
        if not flipped:
            return
        if reachable:
            logger.info("Switch is reachable")
        else:
            logger.warning("Switch became unreachable: %s", reason)
        payload = {"reachable": reachable, "reason": reason}
        try:
            self._recorder.record_event(SWITCH_CONNECTIVITY, payload)
        except Exception:  # noqa: BLE001
            logger.exception("Event recorder failed for %s", SWITCH_CONNECTIVITY)
