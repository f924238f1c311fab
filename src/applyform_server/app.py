"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the default schema once
  - CORS middleware
  - Global exception handlers (ValueError → 404/409/400, KeyError → 404)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``applyform-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from applyform.schema import SchemaStore
from applyform_db.engine import dispose_engine, get_engine

from applyform_server.config import ServerSettings, load_settings
from applyform_server.errors import (
    generic_error_handler,
    key_error_handler,
    value_error_handler,
)
from applyform_server.notifications import Notifier
from applyform_server.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the default schema at startup; dispose the DB pool on shutdown."""
    store: SchemaStore = app.state.store
    if not store.loaded:
        store.load()

    yield

    await dispose_engine()
    logger.info("Database engine disposed")


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Application Form API",
        description="Question schema, application ingestion and admin review",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Shared state read by dependencies; tests may replace any of these
    app.state.settings = settings
    app.state.store = SchemaStore(settings.schema_path)
    app.state.notifier = Notifier(
        settings.resend_api_key, settings.admin_email, settings.notify_from,
    )
    if not app.state.notifier.enabled:
        logger.info("Email notifications disabled (RESEND_API_KEY or ADMIN_EMAIL unset)")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    async def health() -> dict:
        """Readiness probe: verifies DB connectivity."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    register_routes(app)

    return app


# Module-level ASGI export (for uvicorn applyform_server.app:app)
app = create_app()


def cli() -> None:
    """Console-script entry point: ``applyform-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "applyform_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
