from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from assessment_platform.api.errors import REQUEST_ID_HEADER, register_exception_handlers
from assessment_platform.core.config import ServiceSettings
from assessment_platform.core.logging import setup_logging
from assessment_platform.infrastructure.db.session import Database
from fastapi import FastAPI, Request
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()


def build_app(
    settings: ServiceSettings,
    *,
    register_routes: Callable[[FastAPI], None],
) -> FastAPI:
    """Shared application factory: logging, database lifecycle, errors, request ids."""
    setup_logging(settings.log_level, service=settings.app_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.database = Database(settings.async_database_url)
        logger.info(
            "service_startup",
            service=settings.app_name,
            environment=settings.environment,
            version=settings.version,
        )
        try:
            yield
        finally:
            await app.state.database.dispose()
            logger.info("service_shutdown", service=settings.app_name)

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    register_exception_handlers(app)
    register_routes(app)

    @app.middleware("http")
    async def correlation_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid4()))
        # Shared via the ASGI scope so the server-error handler can echo it too.
        request.state.request_id = request_id
        bind_contextvars(
            request_id=request_id,
            path=str(request.url.path),
            method=request.method,
        )
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_contextvars()

    return app
