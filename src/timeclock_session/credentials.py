"""In-memory holder for the short-lived access credential.

Usage example:
    from timeclock_session.credentials import CredentialStore

    store = CredentialStore()
    store.set(token)
    store.get()  # token, or None once expired

The credential is never written to durable storage. Losing it on restart is
expected: the refresh exchange obtains a new one.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

ACCESS_TOKEN_LIFETIME = timedelta(minutes=15)
REFRESH_THRESHOLD = timedelta(minutes=2)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Credential:
    """A bearer value and the window in which it is valid."""

    value: str = field(repr=False)
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class CredentialStore:
    """Volatile store holding at most one access credential.

    `get()` evicts lazily: an expired credential is cleared on read and never
    returned. Writes are last-write-wins.
    """

    lifetime: timedelta = ACCESS_TOKEN_LIFETIME
    refresh_threshold: timedelta = REFRESH_THRESHOLD
    clock: Callable[[], datetime] = utc_now
    _credential: Credential | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def set(self, value: str) -> None:
        """Store `value` as the current credential, valid for `lifetime` from now."""
        issued_at = self.clock()
        credential = Credential(value=value, issued_at=issued_at, expires_at=issued_at + self.lifetime)
        with self._lock:
            self._credential = credential

    def get(self) -> str | None:
        """Return the current credential value, or None if absent or expired."""
        with self._lock:
            credential = self._credential
            if credential is None:
                return None
            if credential.is_expired(self.clock()):
                self._credential = None
                return None
            return credential.value

    def clear(self) -> None:
        with self._lock:
            self._credential = None

    def should_refresh(self) -> bool:
        """Return True when the held credential expires within `refresh_threshold`."""
        with self._lock:
            credential = self._credential
        if credential is None:
            return False
        return self.clock() >= credential.expires_at - self.refresh_threshold

    @property
    def expires_at(self) -> datetime | None:
        with self._lock:
            return self._credential.expires_at if self._credential else None

    @property
    def is_authenticated(self) -> bool:
        return self.get() is not None
