from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    limit: int
    reset_at: float
    retry_after: float


class RateLimiter:
    """Fixed-window request counter keyed by caller.

    A window that has expired is reset lazily the next time its key is seen;
    there is no background sweeper.
    """

    def __init__(self, max_requests: int = 100, window_seconds: float = 900, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                window = _Window(count=1, reset_at=now + self.window_seconds)
                self._windows[key] = window
            else:
                window.count += 1
            count, reset_at = window.count, window.reset_at
        return RateLimitDecision(
            allowed=count <= self.max_requests,
            count=count,
            limit=self.max_requests,
            reset_at=reset_at,
            retry_after=max(0.0, reset_at - now),
        )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
