"""Request logging middleware."""

import logging
import time

from fastapi import Request

logger = logging.getLogger("api.requests")


async def log_requests(request: Request, call_next):
    """Log method, path, status and latency of every request."""
    start_time = time.perf_counter()
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path}", extra={
        "method": request.method,
        "path": request.url.path,
        "statusCode": response.status_code,
        "latencyMs": round((time.perf_counter() - start_time) * 1000, 1),
    })
    return response
