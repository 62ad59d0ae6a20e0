"""
Askwell Backend — Rate Limiting Middleware
==========================================

What:  Per-IP sliding-window limit on write requests (POST, PUT, PATCH,
       DELETE). Reads are never limited.
How:   Each IP keeps the timestamps of its writes inside the window. A write
       that would exceed `rate_limit_requests` within `rate_limit_window`
       seconds is answered with 429 and a Retry-After header computed from
       the oldest timestamp still in the window.

State is in-process memory: correct for a single uvicorn worker only.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from askwell.config import settings
from askwell.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

LIMITED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method not in LIMITED_METHODS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - settings.rate_limit_window

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= settings.rate_limit_requests:
            retry_after = int(timestamps[0] + settings.rate_limit_window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d writes in %ds window",
                client_ip, len(timestamps), settings.rate_limit_window,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        timestamps.append(now)
        self._seen += 1
        if self._seen % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]
        if inactive_ips:
            logger.debug("Dropped %d inactive IPs from the rate limiter", len(inactive_ips))
