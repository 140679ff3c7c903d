"""
Vote repository for likes and dislikes on posts and comments.
"""

from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.domain import CommentTarget, PostTarget, Target, VoteCounts
from .base import BaseRepository


def _target_filter(target: Target):
    if isinstance(target, PostTarget):
        return db_models.Vote.post_id == target.id
    return db_models.Vote.comment_id == target.id


class VoteRepository(BaseRepository[db_models.Vote]):
    """Repository for Vote entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Vote, db)

    def get_user_vote(self, user_id: int, target: Target) -> Optional[db_models.Vote]:
        """
        Get the user's vote on a target.

        Args:
            user_id: Voter ID
            target: Post or comment being voted on

        Returns:
            Vote if the user has one on the target, None otherwise
        """
        return (
            self.db.query(db_models.Vote)
            .filter(db_models.Vote.user_id == user_id, _target_filter(target))
            .first()
        )

    def add_vote(self, user_id: int, target: Target, is_like: bool) -> db_models.Vote:
        """Stage a new vote row (no commit)."""
        vote = db_models.Vote(
            user_id=user_id,
            post_id=target.id if isinstance(target, PostTarget) else None,
            comment_id=target.id if isinstance(target, CommentTarget) else None,
            is_like=is_like,
        )
        self.db.add(vote)
        return vote

    def count_for_target(self, target: Target) -> VoteCounts:
        """
        Count likes and dislikes for a target in one query.

        Args:
            target: Post or comment

        Returns:
            VoteCounts for the target
        """
        likes, dislikes = (
            self.db.query(
                func.count(case((db_models.Vote.is_like.is_(True), 1))),
                func.count(case((db_models.Vote.is_like.is_(False), 1))),
            )
            .filter(_target_filter(target))
            .one()
        )
        return VoteCounts(likes=int(likes), dislikes=int(dislikes))

    def counts_for_posts(self, post_ids: List[int]) -> dict[int, VoteCounts]:
        """Batch load like/dislike counts keyed by post ID."""
        return self._counts_by(db_models.Vote.post_id, post_ids)

    def counts_for_comments(self, comment_ids: List[int]) -> dict[int, VoteCounts]:
        """Batch load like/dislike counts keyed by comment ID."""
        return self._counts_by(db_models.Vote.comment_id, comment_ids)

    def _counts_by(self, column, ids: List[int]) -> dict[int, VoteCounts]:
        if not ids:
            return {}
        rows = (
            self.db.query(
                column,
                func.count(case((db_models.Vote.is_like.is_(True), 1))),
                func.count(case((db_models.Vote.is_like.is_(False), 1))),
            )
            .filter(column.in_(ids))
            .group_by(column)
            .all()
        )
        return {
            row[0]: VoteCounts(likes=int(row[1]), dislikes=int(row[2])) for row in rows
        }

    def get_by_user(self, user_id: int) -> List[db_models.Vote]:
        """Get all votes cast by a user, newest first."""
        return (
            self.db.query(db_models.Vote)
            .filter(db_models.Vote.user_id == user_id)
            .order_by(db_models.Vote.created_at.desc(), db_models.Vote.id.desc())
            .all()
        )

    def delete_for_post(self, post_id: int) -> int:
        """Delete votes cast directly on a post (no commit)."""
        return (
            self.db.query(db_models.Vote)
            .filter(db_models.Vote.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_for_comments(self, comment_ids: List[int]) -> int:
        """Delete votes cast on any of the given comments (no commit)."""
        if not comment_ids:
            return 0
        return (
            self.db.query(db_models.Vote)
            .filter(db_models.Vote.comment_id.in_(comment_ids))
            .delete(synchronize_session=False)
        )
