"""
Login throttle

Per-username sliding window of failed login timestamps, kept in memory and
shared by every request thread. One lock guards the whole table.
"""

import math
import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Callable

from loguru import logger

from helpers.time_utils import utc_now


class LoginThrottle:
    """
    Gate for the login endpoint.

    A username with max_failures failures inside the trailing window is
    refused until the oldest of them leaves the window. Checking never adds
    a timestamp, so polling does not extend the lockout.
    """

    def __init__(
        self,
        max_failures: int = 5,
        window: timedelta = timedelta(minutes=10),
        clock: Callable[[], datetime] = utc_now,
        purge_threshold: int = 1000,
    ):
        if max_failures <= 0:
            raise ValueError("max_failures must be positive")
        self.max_failures = max_failures
        self.window = window
        self.purge_threshold = purge_threshold
        self._clock = clock
        self._lock = threading.Lock()
        # Only the newest max_failures timestamps can ever matter
        self._failures: dict[str, deque[datetime]] = {}

    def _prune(self, username: str, now: datetime) -> deque[datetime] | None:
        """Drop timestamps outside the window. Caller holds the lock."""
        attempts = self._failures.get(username)
        if attempts is None:
            return None
        cutoff = now - self.window
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        if not attempts:
            del self._failures[username]
            return None
        return attempts

    def _purge_stale(self, now: datetime) -> int:
        """Drop usernames whose newest failure left the window. Caller holds the lock."""
        cutoff = now - self.window
        stale = [name for name, attempts in self._failures.items() if attempts[-1] <= cutoff]
        for name in stale:
            del self._failures[name]
        return len(stale)

    def purge(self) -> int:
        """
        Forget every username with no failure left inside the window.

        Returns:
            Number of usernames removed
        """
        with self._lock:
            removed = self._purge_stale(self._clock())
        if removed:
            logger.debug(f"Login throttle purged {removed} stale username(s)")
        return removed

    def check_allowed(self, username: str) -> bool:
        """Return False while the username is locked out."""
        with self._lock:
            attempts = self._prune(username, self._clock())
            return attempts is None or len(attempts) < self.max_failures

    def record_failure(self, username: str) -> None:
        with self._lock:
            now = self._clock()
            attempts = self._prune(username, now)
            if attempts is None:
                if len(self._failures) >= self.purge_threshold:
                    self._purge_stale(now)
                attempts = deque(maxlen=self.max_failures)
                self._failures[username] = attempts
            attempts.append(now)
            if len(attempts) >= self.max_failures:
                logger.warning(f"Login throttle engaged for username '{username}'")

    def record_success(self, username: str) -> None:
        with self._lock:
            self._failures.pop(username, None)

    def retry_after(self, username: str) -> int:
        """
        Seconds until the username may try again.

        Returns:
            0 if not locked out, otherwise whole seconds (rounded up) until
            the oldest counted failure leaves the window
        """
        with self._lock:
            now = self._clock()
            attempts = self._prune(username, now)
            if attempts is None or len(attempts) < self.max_failures:
                return 0
            remaining = (attempts[0] + self.window - now).total_seconds()
            return max(1, math.ceil(remaining))

    def tracked_usernames(self) -> int:
        with self._lock:
            return len(self._failures)
