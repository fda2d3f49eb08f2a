"""Request log context: correlation id (read or minted, echoed back) and workspace session id."""
import uuid
from typing import Callable

import structlog.contextvars
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

HEADER_CORRELATION_ID = "X-Correlation-ID"
HEADER_SESSION_ID = "X-Session-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind correlation_id (and session_id when sent) into structlog contextvars."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(HEADER_CORRELATION_ID, "").strip() or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        context = {"correlation_id": correlation_id, "method": request.method, "path": request.url.path}
        session_id = request.headers.get(HEADER_SESSION_ID, "").strip()
        if session_id:
            context["session_id"] = session_id
        structlog.contextvars.bind_contextvars(**context)

        response = await call_next(request)
        response.headers[HEADER_CORRELATION_ID] = correlation_id
        return response
