"""Fixed-window, per-client-IP rate limiting middleware."""

import logging
import math
from time import monotonic
from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later"


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Allow at most ``max_requests`` per client within ``window_seconds``.

    Counters are kept in process memory and reset when a client's window
    expires. Responses carry the ``RateLimit-*`` headers.
    """

    def __init__(self, app, max_requests: int = 100, window_seconds: int = 15 * 60):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._windows: dict[str, _Window] = {}

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _hit(self, key: str, now: float) -> _Window:
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            window = _Window(started_at=now)
            self._windows[key] = window
        window.count += 1
        return window

    def _headers(self, window: _Window, now: float) -> dict[str, str]:
        reset = max(0, math.ceil(window.started_at + self.window_seconds - now))
        return {
            "RateLimit-Limit": str(self.max_requests),
            "RateLimit-Remaining": str(max(0, self.max_requests - window.count)),
            "RateLimit-Reset": str(reset),
        }

    async def dispatch(self, request: Request, call_next):
        now = monotonic()
        key = self._client_key(request)
        window = self._hit(key, now)
        headers = self._headers(window, now)

        if window.count > self.max_requests:
            logger.warning("Rate limit exceeded", extra={"client": key, "path": request.url.path})
            return JSONResponse(
                status_code=429,
                content={"detail": RATE_LIMIT_MESSAGE},
                headers={**headers, "Retry-After": headers["RateLimit-Reset"]},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
