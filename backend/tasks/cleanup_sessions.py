#!/usr/bin/env python3
"""
Cleanup task for expired login sessions.

Validation already rejects expired sessions; this task only keeps the
sessions table from growing.

This script can be run:
- Via the in-process scheduler (core/scheduler.py), hourly by default
- Via cron: 0 * * * * cd /path/to/backend && python -m tasks.cleanup_sessions
- Manually: python -m tasks.cleanup_sessions
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from loguru import logger  # noqa: E402

from helpers.time_utils import utc_now  # noqa: E402
from repositories.database import SessionLocal  # noqa: E402
from services.session_service import SessionService  # noqa: E402

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def cleanup_expired_sessions(
    db: "Session | None" = None,
    now: datetime | None = None,
) -> dict[str, int]:
    """
    Delete every session whose expiry has passed.

    Args:
        db: Optional database session. If not provided, creates a new session.
            Useful for testing to inject a test database session.
        now: Reference instant (defaults to current UTC time)

    Returns:
        Dictionary with the number of deleted sessions
    """
    should_close = db is None
    if db is None:
        db = SessionLocal()

    try:
        start_time = utc_now()
        deleted_count = SessionService.sweep(db, now=now)
        elapsed = (utc_now() - start_time).total_seconds()
        logger.info(
            f"Session cleanup completed in {elapsed:.2f}s - deleted: {deleted_count}"
        )
        return {"deleted_count": deleted_count}

    except Exception as e:
        db.rollback()
        logger.error(f"Session cleanup failed: {e}")
        raise
    finally:
        if should_close:
            db.close()


if __name__ == "__main__":
    # Configure logging for standalone execution
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        level="INFO",
    )

    try:
        result = cleanup_expired_sessions()
        print(f"Cleanup completed: {result}")
        sys.exit(0)
    except Exception as e:
        print(f"Cleanup failed: {e}", file=sys.stderr)
        sys.exit(1)
