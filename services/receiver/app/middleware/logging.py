"""
Request/Response logging middleware.

Logs every request and response with timing information and binds the
request id and GitHub delivery id to the structlog context, so that every
line logged while the webhook is processed can be traced to its delivery.
"""
import time
import uuid
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..core.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request start, completion and failure; echo X-Request-ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        context = {"request_id": request_id}
        delivery_id = request.headers.get("X-GitHub-Delivery")
        if delivery_id:
            context["delivery_id"] = delivery_id
        structlog.contextvars.bind_contextvars(**context)

        start_time = time.time()
        logger.info(
            "request.started",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

        try:
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "request.completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "request.failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
                exc_info=True,
            )
            # Re-raise to let FastAPI's exception handlers deal with it
            raise

        finally:
            structlog.contextvars.unbind_contextvars(*context)
