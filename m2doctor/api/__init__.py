"""m2-doctor HTTP API — FastAPI application factory."""

from __future__ import annotations

import os

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from m2doctor import __version__
from m2doctor.api.errors import register_error_handlers
from m2doctor.api.middleware.request_id import RequestIDMiddleware
from m2doctor.api.routers import artifacts, repository
from m2doctor.core.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application.

    Logging is configured here only when no caller (e.g. ``m2doctor -v serve``)
    has configured it already.
    """
    if not structlog.is_configured():
        setup_logging()

    app = FastAPI(
        title="m2-doctor",
        version=__version__,
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
    )

    register_error_handlers(app)

    # Default origin is the desktop shell's dev server.
    cors_origins = os.environ.get("M2DOCTOR_CORS_ORIGINS", "http://localhost:1420")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(repository.router, prefix="/api/v1/repository", tags=["repository"])
    app.include_router(artifacts.router, prefix="/api/v1/artifacts", tags=["artifacts"])

    return app
