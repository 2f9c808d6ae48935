"""Single-flight coordination of the access-credential refresh exchange.

The first caller to need a refresh becomes the leader and performs the
exchange. Callers arriving while it is in flight wait for the leader's outcome
instead of starting their own exchange. Every refresh goes through here,
whether triggered by a 401, by a proactive renewal or by session restore: the
server rotates the refresh cookie on each exchange, so a second concurrent
exchange would present a cookie that is already spent.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field

from .credentials import CredentialStore
from .exceptions import ApiError, SessionExpiredError
from .observability import get_logger

logger = get_logger("timeclock_session.refresh")


@dataclass
class RefreshCoordinator:
    """Runs `exchange` at most once per burst of concurrent refresh requests.

    On success the new value is written to `store`. On failure the store is
    cleared and every waiting caller receives the same `SessionExpiredError`.
    `on_failure` runs at most once per failed exchange, and only when at least
    one participating caller asked for it.
    """

    exchange: Callable[[], str]
    store: CredentialStore
    on_failure: Callable[[SessionExpiredError], None]
    exchanges: int = field(default=0, init=False)
    followers: int = field(default=0, init=False)
    _pending: Future[str] | None = field(default=None, init=False, repr=False)
    _notify_pending: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def refresh(self, *, end_session_on_failure: bool = True) -> str:
        """Return a fresh access credential value.

        Args:
            end_session_on_failure: Whether a failed exchange should run
                `on_failure`. Session restore passes False.

        Raises:
            SessionExpiredError: If the refresh exchange failed.
        """
        with self._lock:
            pending = self._pending
            leader = pending is None
            if pending is None:
                pending = Future()
                self._pending = pending
                self._notify_pending = end_session_on_failure
                self.exchanges += 1
            else:
                self._notify_pending = self._notify_pending or end_session_on_failure
                self.followers += 1

        if not leader:
            logger.debug("Waiting on in-flight credential refresh")
            return pending.result()

        try:
            value = self._run_exchange()
        except Exception as exc:
            pending.set_exception(exc)
            raise
        else:
            pending.set_result(value)
            return value
        finally:
            with self._lock:
                self._pending = None
                self._notify_pending = False

    def _run_exchange(self) -> str:
        try:
            value = self.exchange()
        except ApiError as exc:
            logger.warning("Credential refresh failed: %s", exc.message)
            self.store.clear()
            failure = SessionExpiredError.refresh_failed(exc)
            with self._lock:
                notify = self._notify_pending
            if notify:
                self.on_failure(failure)
            raise failure from exc
        self.store.set(value)
        logger.info("Access credential refreshed")
        return value
