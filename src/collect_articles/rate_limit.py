"""Simple in-memory rate limiter for collection requests."""

import threading
import time
from collections import defaultdict
from typing import Callable

from collect_articles.config import RateLimitConfig
from collect_articles.exceptions import RateLimitExceeded


class RateLimiter:
    """
    Sliding-window rate limiter keyed by caller (e.g. client IP).

    Constructed by the host and injected into collect_articles(); it is the
    only state shared between runs.

    Args:
        max_requests: Maximum requests allowed in the window.
        window_seconds: Time window in seconds.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # {key: [timestamp, ...]}
        self._requests: dict[str, list[float]] = defaultdict(list)

    def check(self, key: str) -> None:
        """Record one request for key. Raise RateLimitExceeded if over the limit."""
        with self._lock:
            now = self._clock()
            cutoff = now - self.window_seconds

            # Prune old entries
            entries = [t for t in self._requests[key] if t > cutoff]
            self._requests[key] = entries

            if len(entries) >= self.max_requests:
                retry_after = entries[0] + self.window_seconds - now
                raise RateLimitExceeded(key, max(retry_after, 0.0))

            entries.append(now)

    def evict_expired(self) -> int:
        """Drop keys with no requests inside the window. Returns keys removed."""
        with self._lock:
            cutoff = self._clock() - self.window_seconds
            expired = [key for key, entries in self._requests.items() if not any(t > cutoff for t in entries)]
            for key in expired:
                del self._requests[key]
            return len(expired)

    def __len__(self) -> int:
        return len(self._requests)


def create_rate_limiter(config: RateLimitConfig) -> RateLimiter:
    """Build a limiter from the rate_limit config section."""
    return RateLimiter(max_requests=config.max_requests, window_seconds=config.window_seconds)
