"""
Notification service for in-app notifications.

Fan-out runs after the triggering write has committed and is fire-and-forget:
failures are logged but never raised to the caller, so a comment or vote is
never undone because its notification could not be stored.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.domain import ActingIdentity
from models.exceptions import (
    NotificationNotFoundException,
    PermissionDeniedException,
)
from repositories.notification_repository import NotificationRepository


class NotificationService:
    """Service for notification fan-out and the recipient's inbox."""

    @staticmethod
    def notify_on_interaction(
        db: Session,
        actor_id: int,
        owner_id: int,
        kind: db_models.NotificationKind,
        post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> Optional[db_models.Notification]:
        """
        Store one notification for the owner of the content acted upon.

        Args:
            db: Database session
            actor_id: User who commented or voted
            owner_id: Owner of the post or comment
            kind: comment, like or dislike
            post_id: Referenced post, if any
            comment_id: Referenced comment, if any

        Returns:
            The stored notification, or None when nothing was stored
        """
        if actor_id == owner_id:
            return None

        notification_repo = NotificationRepository(db)
        notification = db_models.Notification(
            user_id=owner_id,
            type=kind,
            from_user_id=actor_id,
            post_id=post_id,
            comment_id=comment_id,
        )
        try:
            return notification_repo.create(notification)
        except SQLAlchemyError as e:
            notification_repo.rollback()
            logger.error(
                f"Failed to store {kind.value} notification for user {owner_id} "
                f"(post={post_id}, comment={comment_id}): {e}"
            )
            return None

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> List[db_models.Notification]:
        """Get a user's notifications, newest first."""
        return NotificationRepository(db).get_for_user(user_id)

    @staticmethod
    def count_unread(db: Session, user_id: int) -> int:
        return NotificationRepository(db).count_unread(user_id)

    @staticmethod
    def mark_read(
        db: Session, actor: ActingIdentity, notification_id: int
    ) -> db_models.Notification:
        """
        Mark a notification as read.

        Raises:
            NotificationNotFoundException: No such notification
            PermissionDeniedException: Actor is not the recipient
        """
        notification_repo = NotificationRepository(db)
        notification = notification_repo.get_by_id(notification_id)
        if notification is None:
            raise NotificationNotFoundException(notification_id)
        if notification.user_id != actor.id:
            raise PermissionDeniedException(
                "You can only mark your own notifications as read"
            )
        notification.is_read = True
        return notification_repo.update(notification)
