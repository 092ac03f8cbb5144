"""
Fixed-window rate limiter keyed by caller identity.

Counts live in process memory only: they are lost on restart and each
worker enforces its own window. Expiry is checked on every access, so the
periodic sweep only bounds memory and never affects decisions.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from starlette.requests import Request

DEFAULT_WINDOW_SECONDS = 60
DEFAULT_MAX_REQUESTS = 10


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float  # epoch seconds


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    remaining: int
    reset_at: float
    limit: int

    def retry_after(self, now: float) -> int:
        """Whole seconds until the window resets (never below 1 when blocked)."""
        return max(1, math.ceil(self.reset_at - now))

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.floor(self.reset_at)),
        }


class RateLimiter:
    """In-memory fixed-window counter.

    The first call for an identifier (or the first after its window has
    passed) opens a new window with count 1. Calls inside the window
    increment until ``max_requests``; after that they are rejected without
    incrementing, until ``reset_at``.
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def check(self, identifier: str) -> RateLimitStatus:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(identifier)

            if entry is None or now > entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                self._entries[identifier] = entry
                return RateLimitStatus(True, self.max_requests - 1, entry.reset_at, self.max_requests)

            if entry.count >= self.max_requests:
                return RateLimitStatus(False, 0, entry.reset_at, self.max_requests)

            entry.count += 1
            return RateLimitStatus(True, self.max_requests - entry.count, entry.reset_at, self.max_requests)

    def sweep(self) -> int:
        """Drop entries whose window has expired. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def get_request_identifier(request: Request, user_id: Optional[str] = None) -> str:
    """Rate-limit key: the authenticated user when known, otherwise the client IP."""
    if user_id:
        return f"user:{user_id}"

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return f"ip:{real_ip.strip()}"

    if request.client and request.client.host:
        return f"ip:{request.client.host}"

    return "unknown"
