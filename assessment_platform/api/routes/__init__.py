from fastapi import FastAPI

from . import assessments, auth, health


def register_auth_routes(app: FastAPI) -> None:
    """Attach the auth service routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)


def register_assessment_routes(app: FastAPI) -> None:
    """Attach the assessment service routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(assessments.router)
