"""Per-request log context and request ids."""
import re
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

_SESSION_PATH = re.compile(r"^/api/sessions/([^/]+)")


def session_id_from_path(path: str) -> Optional[str]:
    """Extract the session id from /api/sessions/{id}[/...] paths."""
    match = _SESSION_PATH.match(path)
    return match.group(1) if match else None


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Bind request context for every log line and time each request.

    Each request gets a UUID, exposed as request.state.request_id and the
    X-Request-ID response header. Requests under /api/sessions/{id} also
    carry session_id, so a session's activity can be followed across
    create, vote and read calls.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }
        session_id = session_id_from_path(request.url.path)
        if session_id:
            context["session_id"] = session_id
        structlog.contextvars.bind_contextvars(**context)

        started = time.perf_counter()
        logger.info(
            "request_started",
            query_params=str(request.query_params) if request.query_params else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception=str(exc),
                exception_type=type(exc).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
