"""
Authentication Service

Handles the login entry point: throttle check, credential verification and
session issuance.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.exceptions import (
    InvalidCredentialsException,
    InvalidPasswordException,
    TooManyAttemptsException,
    UserNotFoundException,
)
from services.credential_service import CredentialService, normalize_username
from services.login_throttle import LoginThrottle
from services.session_service import SessionService


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    def authenticate(
        db: Session,
        throttle: LoginThrottle,
        username: str,
        password: str,
        now: datetime | None = None,
    ) -> db_models.UserSession:
        """
        Log a user in and issue a fresh session.

        Args:
            db: Database session
            throttle: Shared login throttle
            username: Raw username as entered
            password: Plaintext password
            now: Reference instant for the session expiry

        Returns:
            The new session (token and expires_at)

        Raises:
            TooManyAttemptsException: Username is locked out, whatever the password
            InvalidCredentialsException: Unknown username or wrong password
        """
        key = normalize_username(username)

        if not throttle.check_allowed(key):
            logger.warning(f"Login refused for '{key}': too many failed attempts")
            raise TooManyAttemptsException(retry_after=throttle.retry_after(key))

        try:
            user = CredentialService.verify(db, key, password)
        except (UserNotFoundException, InvalidPasswordException):
            throttle.record_failure(key)
            logger.info(f"Failed login for '{key}'")
            raise InvalidCredentialsException()

        throttle.record_success(key)
        return SessionService.create(db, user.id, now=now)
