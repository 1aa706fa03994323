"""
Request correlation for the Catalog Service

Every request runs with a correlation ID bound in a context variable. Log
entries pick it up automatically, and so do event handlers, because the tasks
they run in copy the publishing request's context.
"""

import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import config

MAX_CORRELATION_ID_LENGTH = 128

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    return correlation_id_ctx.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_ctx.set(correlation_id)


def resolve_correlation_id(incoming: Optional[str]) -> str:
    """Reuse the caller's id when it is usable, otherwise mint a new one"""
    if incoming and len(incoming) <= MAX_CORRELATION_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation ID to each request, echoes it on the response and
    logs one completion entry per request.
    """

    async def dispatch(self, request: Request, call_next):
        # Imported here: the logger itself reads the correlation context from this module
        from app.core.logger import logger

        correlation_id = resolve_correlation_id(request.headers.get(config.correlation_id_header))
        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)

        response.headers[config.correlation_id_header] = correlation_id

        level = "warning" if response.status_code >= 400 else "info"
        getattr(logger, level)(
            f"{request.method} {request.url.path} - {response.status_code}",
            metadata={
                "event": "http_request",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        )
        return response
