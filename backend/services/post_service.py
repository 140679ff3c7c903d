"""
Post service for business logic.

delete_post is the only path that removes a post. It removes every row that
references the post in the same transaction, so no reader ever sees comments,
votes or notifications pointing at a missing post.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models.domain import ActingIdentity, PostTarget, VoteCounts
from models.exceptions import (
    PermissionDeniedException,
    PostNotFoundException,
    StorageException,
    ValidationException,
)
from repositories.category_repository import CategoryRepository
from repositories.comment_repository import CommentRepository
from repositories.notification_repository import NotificationRepository
from repositories.post_repository import PostRepository
from repositories.report_repository import ReportRepository
from repositories.vote_repository import VoteRepository

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 100
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 5000


def _validate_post_fields(title: str, content: str) -> tuple[str, str]:
    title = title.strip()
    content = content.strip()
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValidationException(
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
        )
    if not CONTENT_MIN_LENGTH <= len(content) <= CONTENT_MAX_LENGTH:
        raise ValidationException(
            f"Content must be between {CONTENT_MIN_LENGTH} and "
            f"{CONTENT_MAX_LENGTH} characters"
        )
    return title, content


def _build_summary(
    post: db_models.Post, counts: VoteCounts, image_path: Optional[str]
) -> dict:
    categories = sorted(post.categories, key=lambda c: c.id)
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "user_id": post.user_id,
        "author_username": post.author.username,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "category": categories[0].name if categories else None,
        "categories": [schemas.Category.model_validate(c) for c in categories],
        "image_path": image_path,
        "likes": counts.likes,
        "dislikes": counts.dislikes,
    }


class PostService:
    """Service for post-related business logic."""

    @staticmethod
    def create_post(
        db: Session,
        actor: ActingIdentity,
        title: str,
        content: str,
        category_ids: List[int],
        image_path: Optional[str] = None,
    ) -> db_models.Post:
        """
        Create a post with its category links and optional image in one commit.

        Args:
            db: Database session
            actor: Author
            title: Post title
            content: Post body
            category_ids: At least one existing category ID
            image_path: Path of an already stored upload

        Returns:
            Created post

        Raises:
            ValidationException: Bounds violated, no category, or unknown category
        """
        title, content = _validate_post_fields(title, content)
        unique_ids = list(dict.fromkeys(category_ids))
        if not unique_ids:
            raise ValidationException("Select at least one category")
        existing = CategoryRepository(db).get_existing_ids(unique_ids)
        missing = [cid for cid in unique_ids if cid not in existing]
        if missing:
            raise ValidationException(f"Unknown category ID(s): {missing}")

        post_repo = PostRepository(db)
        post = db_models.Post(user_id=actor.id, title=title, content=content)
        try:
            post_repo.add(post)
            post_repo.flush()
            post_repo.add_category_links(post.id, unique_ids)
            if image_path:
                post_repo.add_image(post.id, image_path)
            post_repo.commit()
        except SQLAlchemyError as e:
            post_repo.rollback()
            logger.error(f"Failed to create post for user {actor.id}: {e}")
            raise StorageException()

        post_repo.refresh(post)
        logger.info(f"Post {post.id} created by user {actor.id}")
        return post

    @staticmethod
    def update_post(
        db: Session, actor: ActingIdentity, post_id: int, title: str, content: str
    ) -> db_models.Post:
        """
        Edit a post's title and content.

        Raises:
            PostNotFoundException: No such post
            PermissionDeniedException: Actor is neither owner nor moderator
            ValidationException: Bounds violated
        """
        post_repo = PostRepository(db)
        post = post_repo.get_by_id(post_id)
        if post is None:
            raise PostNotFoundException(post_id)
        if not actor.can_modify(post.user_id):
            raise PermissionDeniedException("You can only edit your own posts")

        post.title, post.content = _validate_post_fields(title, content)
        post.updated_at = utc_now()
        return post_repo.update(post)

    @staticmethod
    def list_posts(
        db: Session,
        category_id: Optional[int] = None,
        sort: schemas.PostSortOrder = schemas.PostSortOrder.DATE,
    ) -> List[schemas.PostSummary]:
        """
        List posts as view data.

        Args:
            db: Database session
            category_id: Only posts in this category
            sort: Newest first or most liked first

        Returns:
            Post summaries with author name, counts, first category and image
        """
        posts = PostRepository(db).list_posts(category_id, sort.value)
        post_ids = [p.id for p in posts]
        counts = VoteRepository(db).counts_for_posts(post_ids)
        images = PostRepository(db).get_image_paths(post_ids)
        return [
            schemas.PostSummary(
                **_build_summary(
                    p, counts.get(p.id, VoteCounts(0, 0)), images.get(p.id)
                )
            )
            for p in posts
        ]

    @staticmethod
    def get_post_detail(
        db: Session, post_id: int, viewer_id: Optional[int] = None
    ) -> schemas.PostDetail:
        """
        Get one post with its comments and all vote counts.

        my_vote is the signed-in viewer's own vote on the post, if any.

        Raises:
            PostNotFoundException: No such post
        """
        post_repo = PostRepository(db)
        vote_repo = VoteRepository(db)
        post = post_repo.get_with_details(post_id)
        if post is None:
            raise PostNotFoundException(post_id)

        comments = CommentRepository(db).get_for_post(post_id)
        comment_counts = vote_repo.counts_for_comments([c.id for c in comments])
        comment_views = []
        for comment in comments:
            counts = comment_counts.get(comment.id, VoteCounts(0, 0))
            comment_views.append(
                schemas.CommentView(
                    id=comment.id,
                    post_id=comment.post_id,
                    user_id=comment.user_id,
                    author_username=comment.author.username,
                    content=comment.content,
                    created_at=comment.created_at,
                    updated_at=comment.updated_at,
                    likes=counts.likes,
                    dislikes=counts.dislikes,
                )
            )

        summary = _build_summary(
            post,
            vote_repo.count_for_target(PostTarget(post_id)),
            post_repo.get_image_paths([post_id]).get(post_id),
        )
        my_vote = None
        if viewer_id is not None:
            vote = vote_repo.get_user_vote(viewer_id, PostTarget(post_id))
            my_vote = vote.is_like if vote is not None else None
        return schemas.PostDetail(**summary, comments=comment_views, my_vote=my_vote)

    @staticmethod
    def delete_post(db: Session, actor: ActingIdentity, post_id: int) -> None:
        """
        Delete a post and everything referencing it as one transaction.

        Order: notifications, reports and votes on the post's comments; the
        comments; votes on the post; category links; images; notifications
        and reports on the post; the post.

        Args:
            db: Database session
            actor: User requesting the deletion
            post_id: Post to delete

        Raises:
            PostNotFoundException: No such post, including when a concurrent
                delete removed it first
            PermissionDeniedException: Actor is neither owner nor moderator
            StorageException: Database failure (nothing was deleted)
        """
        post_repo = PostRepository(db)
        post = post_repo.get_by_id(post_id)
        if post is None:
            raise PostNotFoundException(post_id)
        if not actor.can_modify(post.user_id):
            raise PermissionDeniedException("You can only delete your own posts")

        comment_repo = CommentRepository(db)
        vote_repo = VoteRepository(db)
        notification_repo = NotificationRepository(db)
        report_repo = ReportRepository(db)

        try:
            comment_ids = comment_repo.get_ids_for_post(post_id)
            notification_repo.delete_for_comments(comment_ids)
            report_repo.delete_for_comments(comment_ids)
            vote_repo.delete_for_comments(comment_ids)
            comment_repo.delete_for_post(post_id)
            vote_repo.delete_for_post(post_id)
            post_repo.delete_category_links(post_id)
            post_repo.delete_images(post_id)
            notification_repo.delete_for_post(post_id)
            report_repo.delete_for_post(post_id)
            if post_repo.delete_by_id(post_id) == 0:
                post_repo.rollback()
                raise PostNotFoundException(post_id)
            post_repo.commit()
        except SQLAlchemyError as e:
            post_repo.rollback()
            logger.error(f"Cascade delete of post {post_id} failed: {e}")
            raise StorageException()

        # Bulk deletes bypass the identity map
        db.expunge(post)
        logger.info(
            f"Post {post_id} deleted by user {actor.id} "
            f"with {len(comment_ids)} comment(s)"
        )
