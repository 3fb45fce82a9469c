"""Translate exceptions into ``{"error": message}`` JSON responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quickvote.core.exceptions import QuickVoteError
from quickvote.core.logging_config import get_logger

logger = get_logger(__name__)

GENERIC_ERROR = "Internal server error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def quickvote_error_handler(request: Request, exc: QuickVoteError) -> JSONResponse:
    """Domain errors carry their own status code and user-facing message."""
    if exc.status_code >= 500:
        logger.error("request_storage_fault", code=exc.code, error=exc.message)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = error_response(exc.status_code, message)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: 400 with the first problem."""
    errors = exc.errors()
    if not errors:
        return error_response(400, "Invalid request")

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid request"))
    # Messages from our field validators come through as "Value error, ..."
    message = message.removeprefix("Value error, ")
    return error_response(400, f"{field}: {message}" if field else message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", exception_type=type(exc).__name__)
    return error_response(500, GENERIC_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuickVoteError, quickvote_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
