"""
Comment service for business logic.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models.domain import ActingIdentity
from models.exceptions import (
    CommentNotFoundException,
    PermissionDeniedException,
    PostNotFoundException,
    StorageException,
    ValidationException,
)
from repositories.comment_repository import CommentRepository
from repositories.notification_repository import NotificationRepository
from repositories.post_repository import PostRepository
from repositories.report_repository import ReportRepository
from repositories.vote_repository import VoteRepository
from services.notification_service import NotificationService

CONTENT_MIN_LENGTH = 2
CONTENT_MAX_LENGTH = 1000


def _validate_content(content: str) -> str:
    content = content.strip()
    if not CONTENT_MIN_LENGTH <= len(content) <= CONTENT_MAX_LENGTH:
        raise ValidationException(
            f"Comment must be between {CONTENT_MIN_LENGTH} and "
            f"{CONTENT_MAX_LENGTH} characters"
        )
    return content


class CommentService:
    """Service for comment-related business logic."""

    @staticmethod
    def add_comment(
        db: Session, actor: ActingIdentity, post_id: int, content: str
    ) -> db_models.Comment:
        """
        Add a comment to a post and notify the post owner.

        Args:
            db: Database session
            actor: Commenting user
            post_id: Post being commented on
            content: Comment body

        Returns:
            Created comment

        Raises:
            ValidationException: Content out of bounds
            PostNotFoundException: No such post
        """
        content = _validate_content(content)
        post = PostRepository(db).get_by_id(post_id)
        if post is None:
            raise PostNotFoundException(post_id)

        comment = CommentRepository(db).create(
            db_models.Comment(post_id=post_id, user_id=actor.id, content=content)
        )

        NotificationService.notify_on_interaction(
            db,
            actor_id=actor.id,
            owner_id=post.user_id,
            kind=db_models.NotificationKind.COMMENT,
            post_id=post_id,
        )
        return comment

    @staticmethod
    def edit_comment(
        db: Session, actor: ActingIdentity, comment_id: int, content: str
    ) -> db_models.Comment:
        """
        Edit a comment's content.

        Raises:
            CommentNotFoundException: No such comment
            PermissionDeniedException: Actor is neither author nor moderator
            ValidationException: Content out of bounds
        """
        comment_repo = CommentRepository(db)
        comment = comment_repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundException(comment_id)
        if not actor.can_modify(comment.user_id):
            raise PermissionDeniedException("You can only edit your own comments")

        comment.content = _validate_content(content)
        comment.updated_at = utc_now()
        return comment_repo.update(comment)

    @staticmethod
    def delete_comment(db: Session, actor: ActingIdentity, comment_id: int) -> None:
        """
        Delete a comment with its votes, notifications and reports.

        Raises:
            CommentNotFoundException: No such comment, including when a
                concurrent delete removed it first
            PermissionDeniedException: Actor is neither author nor moderator
            StorageException: Database failure (nothing was deleted)
        """
        comment_repo = CommentRepository(db)
        comment = comment_repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundException(comment_id)
        if not actor.can_modify(comment.user_id):
            raise PermissionDeniedException("You can only delete your own comments")

        try:
            NotificationRepository(db).delete_for_comments([comment_id])
            ReportRepository(db).delete_for_comments([comment_id])
            VoteRepository(db).delete_for_comments([comment_id])
            if comment_repo.delete_by_id(comment_id) == 0:
                comment_repo.rollback()
                raise CommentNotFoundException(comment_id)
            comment_repo.commit()
        except SQLAlchemyError as e:
            comment_repo.rollback()
            logger.error(f"Delete of comment {comment_id} failed: {e}")
            raise StorageException()

        db.expunge(comment)
        logger.info(f"Comment {comment_id} deleted by user {actor.id}")
