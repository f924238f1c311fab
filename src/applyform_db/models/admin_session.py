"""AdminSession ORM model — bearer tokens issued by the admin login."""

from datetime import datetime, timezone

from sqlalchemy import Index, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from applyform_db.models.base import Base


class AdminSession(Base):
    """One issued admin token; valid until ``expires_at``."""

    __tablename__ = "admin_sessions"

    # 64 hex chars (32 random bytes)
    token: Mapped[str] = mapped_column(Text, primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        # Purge of expired tokens scans by expiry
        Index("ix_admin_sessions_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<AdminSession(token={self.token[:8]}..., expires_at={self.expires_at})>"
