"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from applyform_server.routes.applications import router as applications_router
from applyform_server.routes.auth import router as auth_router
from applyform_server.routes.form_config import router as form_config_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(form_config_router, prefix=API_PREFIX)
    app.include_router(applications_router, prefix=API_PREFIX)
