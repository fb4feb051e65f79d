"""
In-memory rolling-window rate limiting for the admin login endpoint
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable

from fastapi import Request

from .errors import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most ``limit`` hits per ``window_seconds`` for each key.

    Keys with no hit inside the window are swept at most once per window.

    Args:
        limit: Maximum number of attempts inside the window
        window_seconds: Length of the rolling window
        clock: Monotonic time source, seconds
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits = {}
        self._lock = Lock()
        self._last_cleanup = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def hit(self, key: str) -> tuple:
        """Record an attempt. Returns (is_allowed, retry_after_seconds)."""
        now = self.clock()
        with self._lock:
            self._cleanup_expired(now)

            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= self.limit:
                retry_after = int(self.window_seconds - (now - hits[0])) + 1
                return False, retry_after

            hits.append(now)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def _cleanup_expired(self, now: float) -> None:
        # caller holds the lock
        if now - self._last_cleanup < self.window_seconds:
            return

        expired = [k for k, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for key in expired:
            del self._hits[key]
        if expired:
            logger.debug(f"🧹 Cleaned up {len(expired)} expired rate limit entries")
        self._last_cleanup = now


def client_ip(request: Request, trusted_proxy_hops: int = 0) -> str:
    """Address of the client as seen by the first proxy we trust.

    ``X-Forwarded-For`` is client-controlled, so it is only read when the
    app runs behind ``trusted_proxy_hops`` reverse proxies; each of them
    appends the address it received the request from.
    """
    if trusted_proxy_hops > 0:
        forwarded = [p.strip() for p in request.headers.get("X-Forwarded-For", "").split(",") if p.strip()]
        if forwarded:
            return forwarded[-min(trusted_proxy_hops, len(forwarded))]
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(limiter: RateLimiter, request: Request, key_prefix: str, trusted_proxy_hops: int = 0) -> None:
    key = f"{key_prefix}:{client_ip(request, trusted_proxy_hops)}"
    allowed, retry_after = limiter.hit(key)
    if not allowed:
        logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {limiter.limit} per {limiter.window_seconds}s")
        raise RateLimitExceededError(retry_after)
