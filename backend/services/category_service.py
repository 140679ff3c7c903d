"""
Category service for business logic.
"""

from typing import List

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.domain import ActingIdentity
from models.exceptions import (
    AlreadyTakenException,
    PermissionDeniedException,
    ValidationException,
)
from repositories.category_repository import CategoryRepository

NAME_MAX_LENGTH = 50


class CategoryService:
    """Service for category-related business logic."""

    @staticmethod
    def list_categories(db: Session) -> List[db_models.Category]:
        return CategoryRepository(db).get_all_categories()

    @staticmethod
    def create_category(
        db: Session, actor: ActingIdentity, name: str
    ) -> db_models.Category:
        """
        Create a category (admins only).

        Raises:
            PermissionDeniedException: Actor is not an admin
            ValidationException: Empty or overlong name
            AlreadyTakenException: Name already used
        """
        if not actor.is_admin:
            raise PermissionDeniedException("Admin role required")

        name = name.strip()
        if not name:
            raise ValidationException("Category name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationException(
                f"Category name must be at most {NAME_MAX_LENGTH} characters"
            )

        category_repo = CategoryRepository(db)
        if category_repo.get_by_name(name) is not None:
            raise AlreadyTakenException(f"Category '{name}' already exists")
        try:
            category = category_repo.create(db_models.Category(name=name))
        except IntegrityError:
            category_repo.rollback()
            raise AlreadyTakenException(f"Category '{name}' already exists")

        logger.info(f"Category {category.id} ({name}) created by user {actor.id}")
        return category

    @staticmethod
    def seed_defaults(db: Session, names: List[str]) -> int:
        """
        Insert any of the given categories that do not exist yet.

        Returns:
            Number of categories inserted
        """
        category_repo = CategoryRepository(db)
        added = 0
        for name in names:
            if category_repo.get_by_name(name) is None:
                category_repo.add(db_models.Category(name=name))
                added += 1
        category_repo.commit()
        return added
