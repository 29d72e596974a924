"""Render every failure as ``{"error": <message>}``."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from assessment_platform.core.errors import ServiceError
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

_MISSING_TYPES = {"missing", "string_too_short"}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def validation_message(errors: Sequence[dict[str, Any]]) -> str:
    """Summarise pydantic errors, e.g. ``session_id and answer are required``."""
    missing = [_field_name(error["loc"]) for error in errors if error["type"] in _MISSING_TYPES]
    if missing:
        if len(missing) == 1:
            return f"{missing[0]} is required"
        return f"{', '.join(missing[:-1])} and {missing[-1]} are required"

    if not errors:
        return "Invalid request"
    first = errors[0]
    return f"{_field_name(first['loc'])}: {first['msg']}"


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc[1:]] if loc and loc[0] == "body" else [str(p) for p in loc]
    return ".".join(parts) or "request body"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = validation_message(exc.errors())
        await logger.ainfo("request_invalid", reason=message)
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Runs outside the correlation middleware, so the header is set here.
        request_id = getattr(request.state, "request_id", None)
        await logger.aerror("unhandled_exception", request_id=request_id, exc_info=exc)
        response = error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
        if request_id is not None:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
