"""
Activity service: everything a user has posted, commented and voted.
"""

from sqlalchemy.orm import Session

import models.schemas as schemas
from models.domain import ActingIdentity
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.vote_repository import VoteRepository


class ActivityService:
    """Service for the profile activity page."""

    @staticmethod
    def get_activity(db: Session, actor: ActingIdentity) -> schemas.UserActivity:
        """
        Collect the actor's posts, comments and votes, each newest first.

        Args:
            db: Database session
            actor: User whose activity is requested

        Returns:
            UserActivity view data
        """
        posts = PostRepository(db).get_by_user(actor.id)
        comments = CommentRepository(db).get_by_user(actor.id)
        votes = VoteRepository(db).get_by_user(actor.id)
        return schemas.UserActivity(
            posts=[schemas.PostRef.model_validate(p) for p in posts],
            comments=[schemas.Comment.model_validate(c) for c in comments],
            votes=[schemas.Vote.model_validate(v) for v in votes],
        )
