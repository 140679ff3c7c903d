"""
Session Service

Issues, validates, revokes and sweeps server-side login sessions. A user has
at most one live session: creating one removes every other.
"""

import secrets
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.time_utils import ensure_utc, utc_now
from models.config import settings
from models.exceptions import SessionExpiredException, SessionNotFoundException
from repositories.session_repository import SessionRepository


def generate_session_token() -> str:
    """Return an opaque URL-safe token from 32 random bytes."""
    return secrets.token_urlsafe(32)


class SessionService:
    """Service for login session lifecycle."""

    @staticmethod
    def create(
        db: Session, user_id: int, now: datetime | None = None
    ) -> db_models.UserSession:
        """
        Create a session and drop the user's other sessions in one commit.

        Args:
            db: Database session
            user_id: Owner of the new session
            now: Reference instant (defaults to current UTC time)

        Returns:
            The new session, carrying token and expires_at
        """
        now = now or utc_now()
        session_repo = SessionRepository(db)

        user_session = db_models.UserSession(
            token=generate_session_token(),
            user_id=user_id,
            expires_at=now + timedelta(hours=settings.SESSION_TTL_HOURS),
            created_at=now,
        )
        try:
            session_repo.add(user_session)
            session_repo.flush()
            removed = session_repo.delete_other_sessions(user_id, user_session.token)
            session_repo.commit()
        except Exception:
            session_repo.rollback()
            raise

        session_repo.refresh(user_session)
        logger.info(
            f"Session created for user {user_id} (replaced {removed} other session(s))"
        )
        return user_session

    @staticmethod
    def validate(db: Session, token: str, now: datetime | None = None) -> int:
        """
        Resolve a token to its owner.

        Args:
            db: Database session
            token: Token presented by the client
            now: Reference instant (defaults to current UTC time)

        Returns:
            ID of the session owner

        Raises:
            SessionNotFoundException: No session has this token
            SessionExpiredException: The session's expiry is at or before now
        """
        if not token:
            raise SessionNotFoundException()
        user_session = SessionRepository(db).get_by_token(token)
        if user_session is None:
            raise SessionNotFoundException()
        if ensure_utc(user_session.expires_at) <= ensure_utc(now or utc_now()):
            raise SessionExpiredException()
        return user_session.user_id

    @staticmethod
    def revoke(db: Session, token: str) -> None:
        """Delete a session. Unknown or empty tokens are ignored."""
        if not token:
            return
        if SessionRepository(db).delete_by_token(token):
            logger.info("Session revoked")

    @staticmethod
    def sweep(db: Session, now: datetime | None = None) -> int:
        """
        Delete every session whose expiry is at or before now.

        Args:
            db: Database session
            now: Reference instant (defaults to current UTC time)

        Returns:
            Number of sessions removed
        """
        return SessionRepository(db).delete_expired(now or utc_now())
