#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/ratelimit.py
"""Fixed-window request rate limiting.

Each client key gets a counter that starts when its first request arrives
and resets once the window has elapsed. A limiter is an ordinary object
owned by whoever constructs it (the HTTP server, or a test), so separate
instances never share counts.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from structcompare.constants import DEFAULT_RATE_LIMIT, DEFAULT_RATE_WINDOW_SECONDS

logger = logging.getLogger(__name__)

# Expired windows are swept once this many keys are being tracked
_SWEEP_THRESHOLD = 10_000


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate-limit check.

    Parameters
    ----------
    allowed : bool
        Whether the request may proceed
    remaining : int
        Requests left in the current window
    reset_after : float
        Seconds until the window resets

    """

    allowed: bool
    remaining: int
    reset_after: float


@dataclass
class _Window:
    count: int
    reset_time: float


class RateLimiter:
    """Fixed-window counter keyed by client identity.

    Parameters
    ----------
    limit : int, default 100
        Requests allowed per window
    window_seconds : float, default 60.0
        Window length
    clock : callable, default time.monotonic
        Source of the current time in seconds

    """

    def __init__(
        self,
        limit: int = DEFAULT_RATE_LIMIT,
        window_seconds: float = DEFAULT_RATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Create an empty limiter."""
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitDecision:
        """Record a request for ``key`` and decide whether it is allowed."""
        with self._lock:
            now = self._clock()
            if len(self._windows) >= _SWEEP_THRESHOLD:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or now >= window.reset_time:
                window = _Window(count=1, reset_time=now + self.window_seconds)
                self._windows[key] = window
                return RateLimitDecision(True, self.limit - 1, self.window_seconds)

            reset_after = window.reset_time - now
            if window.count >= self.limit:
                logger.info("Rate limit exceeded for %s", key)
                return RateLimitDecision(False, 0, reset_after)

            window.count += 1
            return RateLimitDecision(True, self.limit - window.count, reset_after)

    def cleanup(self) -> int:
        """Forget every expired window and return how many were removed."""
        with self._lock:
            return self._sweep(self._clock())

    def reset(self) -> None:
        """Forget all windows."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._windows)

    def _sweep(self, now: float) -> int:
        expired = [key for key, window in self._windows.items() if now >= window.reset_time]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Removed %d expired rate-limit windows", len(expired))
        return len(expired)
