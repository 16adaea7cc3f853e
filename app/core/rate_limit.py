"""Fixed-window request rate limiting, applied before routing and authentication."""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests, please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of RateLimiter.admit for one request."""

    allowed: bool
    remaining: int
    retry_after: int = 0


@dataclass
class _Window:
    started_at: float
    count: int


class RateLimiter:
    """
    Per-client fixed-window counter.

    Each client key gets a window of window_seconds starting at its first
    request; at most max_requests are admitted in it. Check-and-increment runs
    under one lock, so concurrent requests cannot both pass the boundary.
    Expired windows are swept lazily, at most once per window length, which
    bounds memory to the clients seen during the last window.

    The clock is injectable (monotonic seconds) for tests.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def admit(self, client_key: str) -> RateLimitDecision:
        """Count one request for client_key and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            window = self._windows.get(client_key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = _Window(started_at=now, count=0)
                self._windows[client_key] = window
            if window.count >= self.max_requests:
                retry_after = window.started_at + self.window_seconds - now
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    retry_after=max(1, math.ceil(retry_after)),
                )
            window.count += 1
            return RateLimitDecision(
                allowed=True, remaining=self.max_requests - window.count
            )

    def reset(self) -> None:
        """Forget all clients."""
        with self._lock:
            self._windows.clear()

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        if now - self._last_sweep < self.window_seconds:
            return
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now


def client_key_for(request: Request, trust_forwarded_for: bool = False) -> str:
    """Identify the client by IP (first X-Forwarded-For hop only when trusted)."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject over-limit clients with 429 before any route or auth dependency runs."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: RateLimiter,
        trust_forwarded_for: bool = False,
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.trust_forwarded_for = trust_forwarded_for

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        key = client_key_for(request, self.trust_forwarded_for)
        decision = self.limiter.admit(key)
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded: client=%s path=%s retry_after=%ss",
                key,
                request.url.path,
                decision.retry_after,
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": RATE_LIMITED_MESSAGE},
                headers={
                    "Retry-After": str(decision.retry_after),
                    "X-RateLimit-Limit": str(self.limiter.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response
