"""
Vote service for business logic.

A vote request toggles: with no vote on the target it inserts one, with any
existing vote (like or dislike) it removes it. Switching from like to dislike
therefore takes two calls.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.domain import ActingIdentity, PostTarget, Target, VoteCounts
from models.exceptions import (
    CommentNotFoundException,
    DuplicateVoteException,
    PostNotFoundException,
)
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.vote_repository import VoteRepository
from services.notification_service import NotificationService


class VoteService:
    """Service for vote-related business logic."""

    @staticmethod
    def _get_target_owner(db: Session, target: Target) -> int:
        """
        Return the owner of the voted content.

        Raises:
            PostNotFoundException: Post target does not exist
            CommentNotFoundException: Comment target does not exist
        """
        if isinstance(target, PostTarget):
            post = PostRepository(db).get_by_id(target.id)
            if post is None:
                raise PostNotFoundException(target.id)
            return post.user_id
        comment = CommentRepository(db).get_by_id(target.id)
        if comment is None:
            raise CommentNotFoundException(target.id)
        return comment.user_id

    @staticmethod
    def toggle_vote(
        db: Session, actor: ActingIdentity, target: Target, is_like: bool
    ) -> VoteCounts:
        """
        Apply one like/dislike request and return the target's new totals.

        Args:
            db: Database session
            actor: Voting user
            target: PostTarget or CommentTarget
            is_like: True for like, False for dislike

        Returns:
            Like and dislike counts after the transition

        Raises:
            PostNotFoundException: Post target does not exist
            CommentNotFoundException: Comment target does not exist
            DuplicateVoteException: A concurrent request inserted the same vote
        """
        owner_id = VoteService._get_target_owner(db, target)
        vote_repo = VoteRepository(db)

        existing = vote_repo.get_user_vote(actor.id, target)
        inserted = existing is None
        try:
            if existing is not None:
                db.delete(existing)
            else:
                vote_repo.add_vote(actor.id, target, is_like)
            vote_repo.commit()
        except IntegrityError:
            vote_repo.rollback()
            logger.warning(f"Concurrent vote by user {actor.id} on {target}")
            raise DuplicateVoteException()

        counts = vote_repo.count_for_target(target)

        if inserted:
            is_post = isinstance(target, PostTarget)
            NotificationService.notify_on_interaction(
                db,
                actor_id=actor.id,
                owner_id=owner_id,
                kind=(
                    db_models.NotificationKind.LIKE
                    if is_like
                    else db_models.NotificationKind.DISLIKE
                ),
                post_id=target.id if is_post else None,
                comment_id=None if is_post else target.id,
            )

        return counts

    @staticmethod
    def get_counts(db: Session, target: Target) -> VoteCounts:
        return VoteRepository(db).count_for_target(target)
