"""Admin login and token check.

``POST /auth/login`` trades the ``ADMIN_PASSWORD`` for a random bearer
token valid for ``SESSION_HOURS``.  Expired tokens are purged on every
login so the table does not grow without a cron job.
"""

import hmac
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from applyform_db.repository import AdminSessionRepository

from applyform_server.config import ServerSettings
from applyform_server.dependencies import (
    get_admin_session_repo,
    get_db,
    get_settings,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    password: str


class LoginResponse(BaseModel):
    success: bool
    token: str
    # ISO-8601 expiry timestamp (UTC)
    expires: str


class CheckResponse(BaseModel):
    success: bool
    message: str


@router.post("/login")
async def login(
    body: LoginRequest,
    settings: ServerSettings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
    sessions: AdminSessionRepository = Depends(get_admin_session_repo),
) -> LoginResponse:
    """Issue an admin token.  403 if login is not configured, 401 on a bad password."""
    if not settings.admin_password:
        raise HTTPException(
            status_code=403,
            detail="Admin login is disabled (ADMIN_PASSWORD not configured)",
        )
    if not hmac.compare_digest(body.password.encode(), settings.admin_password.encode()):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=401, detail="Invalid password")

    purged = await sessions.purge_expired(db)
    if purged:
        logger.info("Purged %d expired admin sessions", purged)

    row = await sessions.create(db, lifetime=timedelta(hours=settings.session_hours))
    return LoginResponse(success=True, token=row.token, expires=row.expires_at.isoformat())


@router.get("/check")
async def check(_token: str = Depends(require_admin)) -> CheckResponse:
    return CheckResponse(success=True, message="Token is valid")
