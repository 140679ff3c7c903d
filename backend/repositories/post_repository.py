"""
Post repository for database operations.

Also owns the post_categories link rows and image rows, which only exist in
relation to a post.
"""

from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload

import repositories.db_models as db_models
from .base import BaseRepository


class PostRepository(BaseRepository[db_models.Post]):
    """Repository for Post entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Post, db)

    def get_with_details(self, post_id: int) -> Optional[db_models.Post]:
        """
        Get a post with its author and categories loaded.

        Args:
            post_id: Post ID

        Returns:
            Post if found, None otherwise
        """
        return (
            self.db.query(db_models.Post)
            .options(
                joinedload(db_models.Post.author),
                selectinload(db_models.Post.categories),
            )
            .filter(db_models.Post.id == post_id)
            .first()
        )

    def list_posts(
        self, category_id: Optional[int] = None, sort: str = "date"
    ) -> List[db_models.Post]:
        """
        List posts, optionally filtered to one category.

        Args:
            category_id: Only posts linked to this category
            sort: "date" for newest first, "likes" for most liked first

        Returns:
            List of posts with author and categories loaded
        """
        query = self.db.query(db_models.Post).options(
            joinedload(db_models.Post.author),
            selectinload(db_models.Post.categories),
        )
        if category_id is not None:
            query = query.join(
                db_models.PostCategory,
                db_models.PostCategory.post_id == db_models.Post.id,
            ).filter(db_models.PostCategory.category_id == category_id)

        if sort == "likes":
            like_count = (
                self.db.query(
                    db_models.Vote.post_id.label("post_id"),
                    func.count(case((db_models.Vote.is_like.is_(True), 1))).label(
                        "likes"
                    ),
                )
                .filter(db_models.Vote.post_id.isnot(None))
                .group_by(db_models.Vote.post_id)
                .subquery()
            )
            query = query.outerjoin(
                like_count, like_count.c.post_id == db_models.Post.id
            ).order_by(
                func.coalesce(like_count.c.likes, 0).desc(),
                db_models.Post.created_at.desc(),
            )
        else:
            query = query.order_by(
                db_models.Post.created_at.desc(), db_models.Post.id.desc()
            )
        return query.all()

    def get_by_user(self, user_id: int) -> List[db_models.Post]:
        """Get all posts written by a user, newest first."""
        return (
            self.db.query(db_models.Post)
            .filter(db_models.Post.user_id == user_id)
            .order_by(db_models.Post.created_at.desc(), db_models.Post.id.desc())
            .all()
        )

    def add_category_links(self, post_id: int, category_ids: List[int]) -> None:
        """Stage post_categories rows (no commit)."""
        self.db.add_all(
            [
                db_models.PostCategory(post_id=post_id, category_id=category_id)
                for category_id in category_ids
            ]
        )

    def add_image(self, post_id: int, file_path: str) -> None:
        """Stage an image row (no commit)."""
        self.db.add(db_models.Image(post_id=post_id, file_path=file_path))

    def get_image_paths(self, post_ids: List[int]) -> dict[int, str]:
        """Map post ID to the path of its first image."""
        if not post_ids:
            return {}
        rows = (
            self.db.query(db_models.Image.post_id, db_models.Image.file_path)
            .filter(db_models.Image.post_id.in_(post_ids))
            .order_by(db_models.Image.id.asc())
            .all()
        )
        paths: dict[int, str] = {}
        for post_id, file_path in rows:
            paths.setdefault(post_id, file_path)
        return paths

    def delete_category_links(self, post_id: int) -> int:
        """Delete post_categories rows of a post (no commit)."""
        return (
            self.db.query(db_models.PostCategory)
            .filter(db_models.PostCategory.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_images(self, post_id: int) -> int:
        """Delete image rows of a post (no commit). Files on disk are untouched."""
        return (
            self.db.query(db_models.Image)
            .filter(db_models.Image.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_by_id(self, post_id: int) -> int:
        """Delete the post row itself (no commit). Returns rows removed."""
        return (
            self.db.query(db_models.Post)
            .filter(db_models.Post.id == post_id)
            .delete(synchronize_session=False)
        )
