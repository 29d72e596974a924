"""Auth service entry point."""

from __future__ import annotations

import uvicorn
from assessment_platform.api.main import build_app
from assessment_platform.api.routes import register_auth_routes
from assessment_platform.core.config import get_auth_settings
from fastapi import FastAPI


def create_app() -> FastAPI:
    """Application factory for the auth service."""
    return build_app(get_auth_settings(), register_routes=register_auth_routes)


app = create_app()


def run() -> None:
    settings = get_auth_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
