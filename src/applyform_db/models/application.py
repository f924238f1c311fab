"""ORM models for submitted applications and the stored form schema.

Applications keep the applicant's answers as one JSONB document so the form
schema can change without migrations; the admin panel extracts the few
columns it lists (name, email, position) at read time.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from applyform_db.models.base import Base
from applyform_db.models.enums import ApplicationStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    """One submitted job application."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Answers keyed by question id; file answers hold "/uploads/<name>" paths
    data: Mapped[dict] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb"),
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.PENDING.value,
        server_default=text("'pending'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'reviewing', 'accepted', 'rejected')",
            name="status_valid",
        ),
        # Admin list: filter by status, newest first
        Index("ix_applications_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status!r})>"


class FormConfig(Base):
    """The question schema edited in the admin panel.

    Only the newest row is live; saving updates it in place.
    """

    __tablename__ = "form_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # JSON array of question objects
    config: Mapped[list] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<FormConfig(id={self.id}, questions={len(self.config or [])})>"
