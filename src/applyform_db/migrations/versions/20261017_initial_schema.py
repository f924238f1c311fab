"""Create applications, form_config and admin_sessions tables.

Initial schema for the application API:
  - ``applications``: one row per submitted application (JSONB answers,
    review status)
  - ``form_config``: the admin-edited question schema (single live row)
  - ``admin_sessions``: bearer tokens issued by the admin login

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "data", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'pending'"),
        ),
        sa.Column(
            "created_at", TIMESTAMP(timezone=True), nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at", TIMESTAMP(timezone=True), nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_applications"),
        sa.CheckConstraint(
            "status IN ('pending', 'reviewing', 'accepted', 'rejected')",
            name="ck_applications_status_valid",
        ),
    )
    op.create_index(
        "ix_applications_status_created", "applications", ["status", "created_at"],
    )

    op.create_table(
        "form_config",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "config", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "updated_at", TIMESTAMP(timezone=True), nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_form_config"),
    )

    op.create_table(
        "admin_sessions",
        sa.Column("token", sa.Text, nullable=False),
        sa.Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "created_at", TIMESTAMP(timezone=True), nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("token", name="pk_admin_sessions"),
    )
    op.create_index(
        "ix_admin_sessions_expires_at", "admin_sessions", ["expires_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_admin_sessions_expires_at", table_name="admin_sessions")
    op.drop_table("admin_sessions")
    op.drop_table("form_config")
    op.drop_index("ix_applications_status_created", table_name="applications")
    op.drop_table("applications")
