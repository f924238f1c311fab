"""applyform_db — PostgreSQL persistence for applications and admin state.

This package provides the ORM models, async engine factory, and repositories
for storing submitted applications, the admin-edited form schema, and admin
login tokens.  It is consumed by the FastAPI server and the cleanup CLI.
"""

from applyform_db.engine import get_engine, get_session_factory, session_scope
from applyform_db.models import AdminSession, Application, ApplicationStatus, FormConfig
from applyform_db.repository import (
    AdminSessionRepository,
    ApplicationRepository,
    FormConfigRepository,
)

__all__ = [
    "AdminSession",
    "AdminSessionRepository",
    "Application",
    "ApplicationRepository",
    "ApplicationStatus",
    "FormConfig",
    "FormConfigRepository",
    "get_engine",
    "get_session_factory",
    "session_scope",
]
