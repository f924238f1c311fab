"""ORM models for applyform_db."""

from applyform_db.models.admin_session import AdminSession
from applyform_db.models.application import Application, FormConfig
from applyform_db.models.base import Base
from applyform_db.models.enums import ApplicationStatus

__all__ = ["AdminSession", "Application", "ApplicationStatus", "Base", "FormConfig"]
