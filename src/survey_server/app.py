"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the question catalog and the service once
  - CORS middleware
  - Global exception handlers (SurveyError → its status, 400, 500)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``survey-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from survey_core.catalog import QuestionCatalog
from survey_core.errors import SurveyError
from survey_core.service import EvaluationService
from survey_db.engine import dispose_engine, get_engine

from survey_server.config import ServerSettings, load_settings
from survey_server.errors import (
    generic_error_handler,
    request_validation_handler,
    survey_error_handler,
)
from survey_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Load the YAML question catalog (used by the admin reload endpoint)
      2. Build the ``EvaluationService``
      3. Stash them on ``app.state`` for dependency injection

    Shutdown:
      1. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    catalog = QuestionCatalog(settings.catalog_path)
    catalog.load()
    logger.info("QuestionCatalog loaded: %d questions from %s", len(catalog), catalog.path)

    app.state.catalog = catalog
    app.state.service = EvaluationService()

    yield

    # --- Shutdown ---
    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="AI Adoption Survey API",
        description="REST API for taking and reviewing AI adoption surveys",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so the lifespan handler and dependencies can read them
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(SurveyError, survey_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> JSONResponse:
        """Readiness probe — verifies DB connectivity; 503 when it fails."""
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            engine = get_engine()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "timestamp": timestamp,
                    "checks": {"database": "unhealthy"},
                },
            )
        return JSONResponse(
            content={
                "status": "healthy",
                "timestamp": timestamp,
                "checks": {"database": "healthy"},
            },
        )

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn survey_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``survey-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "survey_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
