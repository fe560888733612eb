"""
Custom exception handlers for FastAPI.

Mapping:
- Request validation -> 400 {"errors": [...]}
- NotFoundError / UpstreamError -> 400 {"msg": ...}
- StorageError and anything unhandled -> 500 "Server Error" (plain text)

Request IDs and exception details are logged server-side only.
"""

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from core.exceptions import NotFoundError, StorageError, UpstreamError
from core.logging import get_logger

from .schemas import REQUEST_WIRE_NAMES

logger = get_logger("backend.errors")

SERVER_ERROR_TEXT = "Server Error"


def _get_request_id() -> str:
    """Get the current request ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("request_id", "-")


def _wire_name(part) -> str:
    name = str(part)
    return REQUEST_WIRE_NAMES.get(name, name)


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into {msg, param, location} items."""
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        errors.append(
            {
                "msg": error.get("msg", "Invalid value"),
                "param": _wire_name(loc[-1]) if len(loc) > 1 else None,
                "location": str(loc[0]) if loc else None,
            }
        )
    return errors


def _server_error() -> PlainTextResponse:
    return PlainTextResponse(SERVER_ERROR_TEXT, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        logger.warning("validation_error", errors=errors, request_id=_get_request_id())
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.info("not_found", detail=exc.message, request_id=_get_request_id())
        return JSONResponse(status_code=400, content={"msg": exc.message})

    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: UpstreamError):
        logger.warning(
            "upstream_error",
            detail=exc.message,
            request_id=_get_request_id(),
        )
        return JSONResponse(status_code=400, content={"msg": exc.message})

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError):
        # The cause was logged by the service; keep the trail for tracing
        logger.error(
            "storage_failure",
            detail=exc.message,
            cause=repr(exc.__cause__),
            request_id=_get_request_id(),
        )
        return _server_error()

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return _server_error()
