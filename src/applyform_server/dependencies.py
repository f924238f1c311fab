"""FastAPI dependencies: DB sessions, repositories, shared state, admin auth.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``; it is committed on success and rolled back on error, since
repositories only ``flush()``.

Repository providers exist so tests can swap in in-memory fakes through
``app.dependency_overrides``.
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from applyform.schema import SchemaStore
from applyform_db.engine import get_session_factory
from applyform_db.repository import (
    AdminSessionRepository,
    ApplicationRepository,
    FormConfigRepository,
)

from applyform_server.config import ServerSettings
from applyform_server.notifications import Notifier


# ------------------------------------------------------------------
# Database session (transaction boundary)
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Repositories
# ------------------------------------------------------------------

_applications = ApplicationRepository()
_form_config = FormConfigRepository()
_admin_sessions = AdminSessionRepository()


def get_application_repo() -> ApplicationRepository:
    return _applications


def get_form_config_repo() -> FormConfigRepository:
    return _form_config


def get_admin_session_repo() -> AdminSessionRepository:
    return _admin_sessions


# ------------------------------------------------------------------
# Shared state stashed on app.state during create_app / lifespan
# ------------------------------------------------------------------

def get_settings(request: Request) -> ServerSettings:
    return request.app.state.settings


def get_store(request: Request) -> SchemaStore:
    """Return the SchemaStore singleton from ``app.state``."""
    return request.app.state.store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


# ------------------------------------------------------------------
# Admin auth: Bearer token issued by POST /auth/login
# ------------------------------------------------------------------

def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_admin(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
    sessions: AdminSessionRepository = Depends(get_admin_session_repo),
) -> str:
    """Validate the ``Authorization: Bearer <token>`` header.

    Returns the token.  401 when the header is missing or malformed, or
    when the token is unknown or expired.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    if not await sessions.is_valid(db, token):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return token
