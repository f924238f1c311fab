"""Admin session cleanup CLI — ``applyform-cleanup``.

Logins already purge expired tokens opportunistically; this command does it
on demand (cron, deploys) and can revoke every token at once.

Examples::

    # Delete expired admin tokens
    applyform-cleanup

    # Log out every admin (e.g. after rotating ADMIN_PASSWORD)
    applyform-cleanup --all
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

logger = logging.getLogger(__name__)


async def run_cleanup(*, revoke_all: bool = False) -> int:
    """Delete expired (or all) admin sessions; returns the number removed."""
    # Lazy imports keep DB machinery out of ``--help``
    from applyform_db.engine import dispose_engine, session_scope
    from applyform_db.repository import AdminSessionRepository

    repo = AdminSessionRepository()
    try:
        async with session_scope() as db:
            if revoke_all:
                affected = await repo.revoke_all(db)
                action = "revoke_all"
            else:
                affected = await repo.purge_expired(db)
                action = "purge_expired"

        logger.info("Cleanup complete: action=%s, affected_rows=%d", action, affected)
        return affected
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``applyform-cleanup``."""
    parser = argparse.ArgumentParser(
        prog="applyform-cleanup",
        description="Remove admin login sessions from the database.",
    )
    parser.add_argument(
        "--all",
        dest="revoke_all",
        action="store_true",
        default=False,
        help="Revoke every session, not only expired ones",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    affected = asyncio.run(run_cleanup(revoke_all=args.revoke_all))
    print(f"Removed sessions: {affected}")
    sys.exit(0)
