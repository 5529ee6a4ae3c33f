"""
Per-client rate limiting.

Sliding window counter keyed on client address: at most `max_requests`
hits per `window_s` seconds. Over the cap, requests are rejected with
429, never queued. The limiter is the one piece of state shared across
in-flight requests, so every read-modify-write happens under a lock.
Once per window, keys with no hit left inside it are dropped, so memory
stays proportional to the clients seen in the last window.
"""

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."
EXEMPT_PREFIXES = ("/health",)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after_s: int = 0


class SlidingWindowRateLimiter:
    """Thread-safe sliding-window request counter."""

    def __init__(
        self,
        max_requests: int = 60,
        window_s: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, key: str) -> RateLimitDecision:
        """Record one request for `key` unless it is over the cap."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_s:
                self._sweep(now)

            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self.window_s:
                hits.popleft()

            if len(hits) >= self.max_requests:
                retry_after = math.ceil(hits[0] + self.window_s - now)
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    retry_after_s=max(1, retry_after),
                )

            hits.append(now)
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(hits),
            )

    def tracked_keys(self) -> int:
        """Number of clients currently holding a counter."""
        with self._lock:
            return len(self._hits)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock. A key whose newest hit has left the
        # window has nothing left to count.
        cutoff = now - self.window_s
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in expired:
            del self._hits[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Dropped {len(expired)} idle rate-limit keys")

    def reset(self) -> None:
        """Forget all counters (for testing)."""
        with self._lock:
            self._hits.clear()


def client_address(request: Request, trust_proxy: bool = True) -> str:
    """Client address, taking the first X-Forwarded-For hop behind a proxy."""
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Apply the app's rate limiter to every non-health request.

    The limiter lives on app.state (set at start-up), so the middleware
    can be registered before configuration has been loaded.
    """

    async def dispatch(self, request: Request, call_next):
        limiter = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or request.url.path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        trust_proxy = getattr(request.app.state, "trust_proxy", True)
        key = client_address(request, trust_proxy=trust_proxy)
        decision = limiter.hit(key)

        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {key} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"message": RATE_LIMIT_MESSAGE},
                headers={
                    "Retry-After": str(decision.retry_after_s),
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response
