"""
Session repository for database operations.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class SessionRepository(BaseRepository[db_models.UserSession]):
    """Repository for server-side login sessions, keyed by token."""

    def __init__(self, db: Session):
        super().__init__(db_models.UserSession, db)

    def get_by_token(self, token: str) -> Optional[db_models.UserSession]:
        """
        Get a session row regardless of expiry.

        Args:
            token: Opaque session token

        Returns:
            Session if found, None otherwise
        """
        return (
            self.db.query(db_models.UserSession)
            .filter(db_models.UserSession.token == token)
            .first()
        )

    def delete_other_sessions(self, user_id: int, keep_token: str) -> int:
        """
        Delete every session of a user except one (no commit).

        Args:
            user_id: Owner of the sessions
            keep_token: Token of the session to keep

        Returns:
            Number of deleted sessions
        """
        return (
            self.db.query(db_models.UserSession)
            .filter(
                db_models.UserSession.user_id == user_id,
                db_models.UserSession.token != keep_token,
            )
            .delete(synchronize_session=False)
        )

    def delete_by_token(self, token: str) -> int:
        """Delete a session by token and commit. Returns rows removed."""
        count = (
            self.db.query(db_models.UserSession)
            .filter(db_models.UserSession.token == token)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def delete_expired(self, now: datetime) -> int:
        """
        Delete sessions whose expiry is at or before now and commit.

        Args:
            now: Reference instant

        Returns:
            Number of deleted sessions
        """
        count = (
            self.db.query(db_models.UserSession)
            .filter(db_models.UserSession.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def count_for_user(self, user_id: int) -> int:
        return (
            self.db.query(db_models.UserSession)
            .filter(db_models.UserSession.user_id == user_id)
            .count()
        )
