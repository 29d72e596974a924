"""Assessment service entry point."""

from __future__ import annotations

import structlog
import uvicorn
from assessment_platform.api.main import build_app
from assessment_platform.api.routes import register_assessment_routes
from assessment_platform.core.config import get_assessment_settings
from fastapi import FastAPI

logger = structlog.get_logger()


def create_app() -> FastAPI:
    """Application factory for the assessment service."""
    settings = get_assessment_settings()
    app = build_app(settings, register_routes=register_assessment_routes)

    if settings.jwt_verification_key is None:
        # Every authenticated request will be rejected until this is fixed.
        logger.error(
            "jwt_verification_key_missing",
            expected="AUTH_JWT_PUBLIC_KEY or AUTH_JWT_SECRET",
        )

    return app


app = create_app()


def run() -> None:
    settings = get_assessment_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
