"""Server configuration read from environment variables.

Defaults suit local development.  Admin login is disabled until
``ADMIN_PASSWORD`` is set, and email notification is skipped until
``RESEND_API_KEY`` is set.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # Admin login (None = login refused with 403)
    admin_password: str | None = None
    # Lifetime of an issued admin token
    session_hours: int = 24

    # Where multipart uploads are written
    upload_dir: str = "uploads"

    # Default schema file override (None → packaged default_schema.yaml)
    schema_path: str | None = None

    # New-application email via Resend (None = notifications off)
    resend_api_key: str | None = None
    admin_email: str | None = None
    notify_from: str = "Applications <onboarding@resend.dev>"


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` and related environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        session_hours=int(os.getenv("SESSION_HOURS", "24")),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        schema_path=os.getenv("SERVER_SCHEMA_PATH") or None,
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        admin_email=os.getenv("ADMIN_EMAIL") or None,
        notify_from=os.getenv(
            "NOTIFY_FROM", "Applications <onboarding@resend.dev>",
        ),
    )
