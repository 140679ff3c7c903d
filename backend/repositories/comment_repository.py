"""
Comment repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class CommentRepository(BaseRepository[db_models.Comment]):
    """Repository for Comment entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Comment, db)

    def get_for_post(self, post_id: int) -> List[db_models.Comment]:
        """
        Get comments on a post with their authors, oldest first.

        Args:
            post_id: Post ID

        Returns:
            List of comments
        """
        return (
            self.db.query(db_models.Comment)
            .options(joinedload(db_models.Comment.author))
            .filter(db_models.Comment.post_id == post_id)
            .order_by(db_models.Comment.created_at.asc(), db_models.Comment.id.asc())
            .all()
        )

    def get_ids_for_post(self, post_id: int) -> List[int]:
        rows = (
            self.db.query(db_models.Comment.id)
            .filter(db_models.Comment.post_id == post_id)
            .all()
        )
        return [row.id for row in rows]

    def get_by_user(self, user_id: int) -> List[db_models.Comment]:
        """Get all comments written by a user, newest first."""
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.user_id == user_id)
            .order_by(db_models.Comment.created_at.desc(), db_models.Comment.id.desc())
            .all()
        )

    def delete_for_post(self, post_id: int) -> int:
        """Delete every comment on a post (no commit)."""
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_by_id(self, comment_id: int) -> int:
        """Delete one comment (no commit). Returns rows removed."""
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.id == comment_id)
            .delete(synchronize_session=False)
        )
