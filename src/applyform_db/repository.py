"""Async CRUD repositories for applications, form config and admin sessions.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries: repositories ``flush()`` but never ``commit()``.

The repositories avoid business-logic validation (schema checks, answer
validation) — that belongs in the form engine and the API layer.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from applyform_db.models.admin_session import AdminSession
from applyform_db.models.application import Application, FormConfig
from applyform_db.models.enums import ApplicationStatus


class ApplicationRepository:
    """Read/write operations on the ``applications`` table."""

    async def create(self, db: AsyncSession, *, data: dict[str, Any]) -> Application:
        """Insert a new ``pending`` application and return it (id populated)."""
        row = Application(data=data, status=ApplicationStatus.PENDING.value)
        db.add(row)
        await db.flush()
        return row

    async def get(self, db: AsyncSession, application_id: int) -> Application | None:
        return await db.get(Application, application_id)

    async def list_applications(
        self,
        db: AsyncSession,
        *,
        status: ApplicationStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Application]:
        """List applications newest first, optionally filtered by status."""
        stmt = select(Application).order_by(
            Application.created_at.desc(), Application.id.desc(),
        )
        if status is not None:
            stmt = stmt.where(Application.status == status.value)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def update_status(
        self, db: AsyncSession, application_id: int, status: ApplicationStatus,
    ) -> Application | None:
        """Set the review status; returns ``None`` if the id does not exist."""
        row = await db.get(Application, application_id)
        if row is None:
            return None
        row.status = status.value
        row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row


class FormConfigRepository:
    """Read/write the single live row of ``form_config``."""

    async def get_latest(self, db: AsyncSession) -> FormConfig | None:
        stmt = select(FormConfig).order_by(FormConfig.id.desc()).limit(1)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, db: AsyncSession, config: list[dict[str, Any]]) -> FormConfig:
        """Replace the live schema, inserting the first row if none exists."""
        row = await self.get_latest(db)
        if row is None:
            row = FormConfig(config=config)
            db.add(row)
        else:
            row.config = config
            row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row


class AdminSessionRepository:
    """Issue, check and purge admin bearer tokens."""

    async def create(self, db: AsyncSession, *, lifetime: timedelta) -> AdminSession:
        """Issue a fresh random token valid for ``lifetime``."""
        now = datetime.now(timezone.utc)
        row = AdminSession(
            token=secrets.token_hex(32),
            expires_at=now + lifetime,
            created_at=now,
        )
        db.add(row)
        await db.flush()
        return row

    async def is_valid(self, db: AsyncSession, token: str) -> bool:
        """True if ``token`` exists and has not expired."""
        stmt = select(AdminSession.token).where(
            AdminSession.token == token,
            AdminSession.expires_at > datetime.now(timezone.utc),
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete expired tokens; returns the number removed."""
        stmt = delete(AdminSession).where(
            AdminSession.expires_at < datetime.now(timezone.utc),
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0

    async def revoke_all(self, db: AsyncSession) -> int:
        """Delete every token (forces all admins to log in again)."""
        result = await db.execute(delete(AdminSession))
        await db.flush()
        return result.rowcount or 0
