"""
Sliding-window rate limiter.

Bounds requests per principal (user id or IP-derived key) within a rolling
time window. The window state lives in an injected counter store so that a
shared backend can replace the in-process default without changing the
algorithm.

Dependencies: threading, tutor_backend.core.exceptions
System role: Abuse protection in front of retrieval and generation
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from tutor_backend.core.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


class RateWindowStore(Protocol):
    """Storage for per-principal request timestamps."""

    def locked_window(self, key: str) -> AbstractContextManager[list[float]]:
        """
        Exclusive access to one principal's timestamp list.

        The yielded list may be mutated in place; changes are persisted when
        the context exits.
        """
        ...


class InMemoryRateWindowStore:
    """
    Process-local window store.

    One lock per principal key, so concurrent requests for different
    principals never contend. The registry lock is held only while the
    per-key lock is looked up or created.

    Note:
        State is per process. With N replicas the effective global limit is
        N times the configured limit.
    """

    def __init__(self) -> None:
        self._windows: dict[str, list[float]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def locked_window(self, key: str) -> Iterator[list[float]]:
        with self._lock_for(key):
            window = self._windows.setdefault(key, [])
            yield window

    def __len__(self) -> int:
        return len(self._windows)


class SlidingWindowRateLimiter:
    """
    Sliding-window limiter with capacity ``limit`` per ``window_seconds``.

    Timestamps older than the window are purged lazily on every check.
    """

    def __init__(
        self,
        limit: int = 20,
        window_seconds: float = 300.0,
        store: RateWindowStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            limit: Requests allowed per window
            window_seconds: Window duration in seconds
            store: Counter store (in-memory by default)
            clock: Monotonic time source in seconds
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self._store = store if store is not None else InMemoryRateWindowStore()
        self._clock = clock

    def check(self, principal_id: str) -> bool:
        """
        Record a request for the principal if it is within its allowance.

        Args:
            principal_id: User id or IP-derived key

        Returns:
            bool: True if allowed (and recorded), False if rejected
        """
        now = self._clock()
        window_start = now - self.window_seconds

        with self._store.locked_window(principal_id) as timestamps:
            timestamps[:] = [t for t in timestamps if t > window_start]

            if len(timestamps) >= self.limit:
                return False

            timestamps.append(now)
            return True

    def enforce(self, principal_id: str) -> None:
        """
        Check the principal and raise when over the limit.

        Raises:
            RateLimitedError: If the principal exhausted its window
        """
        if not self.check(principal_id):
            logger.warning(f"{__name__}:enforce - Rate limit exceeded for {principal_id}")
            raise RateLimitedError(
                principal_id,
                details={"limit": self.limit, "window_seconds": self.window_seconds},
            )
