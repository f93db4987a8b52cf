# smartshop/middleware.py
"""Per-request id, timing and sync backlog logging."""

import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from smartshop.logging_config import get_logger

logger = get_logger("http")

REQUEST_ID_HEADER = "X-Request-ID"
WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id and log its outcome.

    Writes also log how many remote mirror jobs are still queued, which is
    the first thing to check when a till reports stale data.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed after {elapsed:.1f}ms: {e}",
                exc_info=True
            )
            raise

        elapsed = (time.perf_counter() - started) * 1000
        message = f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} in {elapsed:.1f}ms"

        ctx = getattr(request.app.state, "ctx", None)
        if request.method in WRITE_METHODS and ctx is not None:
            message += f" (sync backlog: {ctx.sync.pending_count})"
        logger.info(message)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.2f}ms"
        return response
