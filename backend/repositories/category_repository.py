"""
Category repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class CategoryRepository(BaseRepository[db_models.Category]):
    """Repository for Category entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Category, db)

    def get_all_categories(self) -> List[db_models.Category]:
        return self.db.query(db_models.Category).order_by(db_models.Category.id).all()

    def get_by_name(self, name: str) -> Optional[db_models.Category]:
        """
        Get category by exact name.

        Args:
            name: Category name

        Returns:
            Category if found, None otherwise
        """
        return (
            self.db.query(db_models.Category)
            .filter(db_models.Category.name == name)
            .first()
        )

    def get_existing_ids(self, category_ids: List[int]) -> set[int]:
        """Return the subset of the given IDs that exist."""
        if not category_ids:
            return set()
        rows = (
            self.db.query(db_models.Category.id)
            .filter(db_models.Category.id.in_(category_ids))
            .all()
        )
        return {row.id for row in rows}
