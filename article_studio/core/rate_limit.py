"""Fixed-window request counters keyed by caller identity."""

import logging
import threading
import time
from typing import Callable, Dict, Tuple

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most ``limit`` requests per key within each window.

    Counters live in process memory and are lost on restart. The first
    request for a key opens its window; once the window expires the next
    request opens a fresh one.
    """

    def __init__(
        self,
        limit: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._next_prune = 0.0
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "RateLimiter":
        return cls(settings.rate_limit_requests, settings.rate_limit_window_seconds)

    def allow(self, key: str) -> bool:
        """Count a request for ``key`` and report whether it is within budget."""
        now = self._clock()
        with self._lock:
            if now >= self._next_prune:
                self._prune(now)
            count, reset_at = self._windows.get(key, (0, 0.0))
            if count == 0 or now > reset_at:
                self._windows[key] = (1, now + self.window_seconds)
                return True
            if count >= self.limit:
                logger.warning(f"Rate limit exceeded for {key}")
                return False
            self._windows[key] = (count + 1, reset_at)
            return True

    def _prune(self, now: float) -> None:
        # Caller holds the lock; runs at most once per window
        expired = [key for key, (_, reset_at) in self._windows.items() if reset_at < now]
        for key in expired:
            del self._windows[key]
        self._next_prune = now + self.window_seconds

    def reset(self) -> None:
        """Forget all counters."""
        with self._lock:
            self._windows.clear()
