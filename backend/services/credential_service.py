"""
Credential Service

Registers accounts and verifies username/password pairs. Email and username
are normalized the same way on insert and on lookup.
"""

import re

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from authentication.passwords import (
    BCRYPT_MAX_BYTES,
    DUMMY_PASSWORD_HASH,
    get_password_hash,
    verify_password,
)
from models.exceptions import (
    AlreadyTakenException,
    InvalidPasswordException,
    StorageException,
    UserNotFoundException,
    ValidationException,
)
from repositories.user_repository import UserRepository

EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 50


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_username(username: str) -> str:
    """Trim, lower-case and drop inner spaces."""
    return username.strip().lower().replace(" ", "")


class CredentialService:
    """Service for account registration and credential checks."""

    @staticmethod
    def validate_registration(email: str, username: str, password: str) -> None:
        """
        Validate already-normalized registration fields.

        Raises:
            ValidationException: On the first field that is out of bounds
        """
        if not EMAIL_PATTERN.match(email):
            raise ValidationException("Invalid email format")
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise ValidationException(
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters"
            )
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            raise ValidationException(
                f"Password must be between {PASSWORD_MIN_LENGTH} and "
                f"{PASSWORD_MAX_LENGTH} characters"
            )
        if len(password.encode()) > BCRYPT_MAX_BYTES:
            raise ValidationException(
                f"Password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded"
            )

    @staticmethod
    def register(
        db: Session, email: str, username: str, password: str
    ) -> db_models.User:
        """
        Create a new account with a bcrypt-hashed password.

        Args:
            db: Database session
            email: Raw email as entered
            username: Raw username as entered
            password: Plaintext password (never stored or logged)

        Returns:
            Created user

        Raises:
            ValidationException: If any field is out of bounds
            AlreadyTakenException: If email or username is already used,
                including a concurrent registration losing the insert race
            StorageException: On any other database failure
        """
        email = normalize_email(email)
        username = normalize_username(username)
        CredentialService.validate_registration(email, username, password)

        user_repo = UserRepository(db)
        if user_repo.email_or_username_taken(email, username):
            raise AlreadyTakenException("Email or username already taken")

        user = db_models.User(
            email=email,
            username=username,
            hashed_password=get_password_hash(password),
            role=db_models.Role.USER,
        )
        try:
            user = user_repo.create(user)
        except IntegrityError:
            user_repo.rollback()
            raise AlreadyTakenException("Email or username already taken")
        except SQLAlchemyError as e:
            user_repo.rollback()
            logger.error(f"Failed to register user {username}: {e}")
            raise StorageException()

        logger.info(f"Registered user {user.id} ({username})")
        return user

    @staticmethod
    def verify(db: Session, username: str, password: str) -> db_models.User:
        """
        Check a username/password pair.

        An unknown username still costs one bcrypt comparison.

        Args:
            db: Database session
            username: Raw username as entered
            password: Plaintext password

        Returns:
            The matching user

        Raises:
            UserNotFoundException: No account has this username
            InvalidPasswordException: Password does not match
        """
        user = UserRepository(db).get_by_username(normalize_username(username))
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            raise UserNotFoundException("User not found")
        if not verify_password(password, user.hashed_password):
            raise InvalidPasswordException()
        return user
