"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI

from .api.routes import health, tours
from .config import settings


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(tours.router, prefix=settings.api_prefix)
    return app


app = create_app()
