"""
User repository for database operations.

Callers pass already-normalized (lower-cased) email and username values.
"""

from typing import Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: Normalized user email

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User).filter(db_models.User.email == email).first()
        )

    def get_by_username(self, username: str) -> Optional[db_models.User]:
        """
        Get user by username.

        Args:
            username: Normalized username

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.username == username)
            .first()
        )

    def email_or_username_taken(self, email: str, username: str) -> bool:
        """Check whether either identifier already belongs to an account."""
        return (
            self.db.query(db_models.User.id)
            .filter(
                (db_models.User.email == email)
                | (db_models.User.username == username)
            )
            .first()
            is not None
        )

    def get_role(self, user_id: int) -> Optional[db_models.Role]:
        """
        Look up only the role column for a user.

        Args:
            user_id: User ID

        Returns:
            Role if the user exists, None otherwise
        """
        row = (
            self.db.query(db_models.User.role)
            .filter(db_models.User.id == user_id)
            .first()
        )
        return row.role if row else None
