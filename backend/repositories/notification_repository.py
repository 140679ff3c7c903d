"""
Notification repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class NotificationRepository(BaseRepository[db_models.Notification]):
    """Repository for Notification entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Notification, db)

    def get_for_user(self, user_id: int) -> List[db_models.Notification]:
        """
        Get notifications addressed to a user, newest first.

        Args:
            user_id: Recipient ID

        Returns:
            List of notifications with their source user loaded
        """
        return (
            self.db.query(db_models.Notification)
            .options(joinedload(db_models.Notification.from_user))
            .filter(db_models.Notification.user_id == user_id)
            .order_by(
                db_models.Notification.created_at.desc(),
                db_models.Notification.id.desc(),
            )
            .all()
        )

    def count_unread(self, user_id: int) -> int:
        return (
            self.db.query(db_models.Notification)
            .filter(
                db_models.Notification.user_id == user_id,
                db_models.Notification.is_read == False,  # noqa: E712
            )
            .count()
        )

    def delete_for_post(self, post_id: int) -> int:
        """Delete notifications referencing a post (no commit)."""
        return (
            self.db.query(db_models.Notification)
            .filter(db_models.Notification.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_for_comments(self, comment_ids: List[int]) -> int:
        """Delete notifications referencing any of the given comments (no commit)."""
        if not comment_ids:
            return 0
        return (
            self.db.query(db_models.Notification)
            .filter(db_models.Notification.comment_id.in_(comment_ids))
            .delete(synchronize_session=False)
        )
