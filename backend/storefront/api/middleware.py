"""API middleware for request processing."""

import logging
import time
from collections import defaultdict
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from storefront.utils.helpers import generate_request_id

logger = logging.getLogger(__name__)

_STALE_CLIENT_THRESHOLD = 300  # seconds before a silent client's entry is evicted


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with timing and tags it with a request id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        request.state.request_id = request_id
        start_time = time.monotonic()

        logger.info(
            "Request: %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.monotonic() - start_time
            logger.error(
                "Request failed after %.3fs: %s",
                process_time,
                e,
                extra={"request_id": request_id, "process_time_s": round(process_time, 3)},
            )
            raise

        process_time = time.monotonic() - start_time
        logger.info(
            "Response: %s in %.3fs",
            response.status_code,
            process_time,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time_s": round(process_time, 3),
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiting per caller.

    Callers are keyed by ``X-User-ID`` when present, otherwise by client
    address. Stale entries are evicted periodically.
    """

    def __init__(self, app, requests_per_period: int = 60, period_s: int = 60) -> None:
        super().__init__(app)
        self.requests_per_period = requests_per_period
        self.period_s = period_s
        self._request_counts: dict[str, list[float]] = defaultdict(list)
        self._last_cleanup = time.monotonic()

    def _cleanup_stale_clients(self, now: float) -> None:
        """Remove entries for clients that have not sent requests recently."""
        if now - self._last_cleanup < _STALE_CLIENT_THRESHOLD:
            return
        cutoff = now - _STALE_CLIENT_THRESHOLD
        stale = [cid for cid, ts in self._request_counts.items() if not ts or ts[-1] < cutoff]
        for cid in stale:
            del self._request_counts[cid]
        self._last_cleanup = now

    @staticmethod
    def _client_key(request: Request) -> str:
        user_id = request.headers.get("X-User-ID")
        if user_id:
            return f"user:{user_id}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_id = self._client_key(request)
        now = time.monotonic()
        window_start = now - self.period_s

        timestamps = self._request_counts[client_id]
        self._request_counts[client_id] = [t for t in timestamps if t > window_start]

        self._cleanup_stale_clients(now)

        if len(self._request_counts[client_id]) >= self.requests_per_period:
            logger.warning("Rate limit exceeded for %s", client_id)
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded", "retry_after": self.period_s},
                headers={"Retry-After": str(self.period_s)},
            )

        self._request_counts[client_id].append(now)
        return await call_next(request)
