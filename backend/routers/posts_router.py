from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from models.domain import ActingIdentity
from repositories.database import get_db
from services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=List[schemas.PostSummary])
def list_posts(
    category_id: Optional[int] = None,
    sort: schemas.PostSortOrder = schemas.PostSortOrder.DATE,
    db: Session = Depends(get_db),
) -> List[schemas.PostSummary]:
    """
    List posts.

    - category_id: only posts in this category
    - sort: "date" (newest first) or "likes" (most liked first)
    """
    return PostService.list_posts(db, category_id=category_id, sort=sort)


@router.get("/{post_id}", response_model=schemas.PostDetail)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[ActingIdentity] = Depends(auth.get_optional_identity),
) -> schemas.PostDetail:
    """Post detail. Anonymous readers get the same page without my_vote."""
    viewer_id = viewer.id if viewer is not None else None
    return PostService.get_post_detail(db, post_id, viewer_id=viewer_id)


@router.post(
    "", response_model=schemas.PostDetail, status_code=status.HTTP_201_CREATED
)
def create_post(
    post: schemas.PostCreate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.PostDetail:
    created = PostService.create_post(
        db,
        identity,
        title=post.title,
        content=post.content,
        category_ids=post.category_ids,
        image_path=post.image_path,
    )
    return PostService.get_post_detail(db, created.id)


@router.put("/{post_id}", response_model=schemas.PostDetail)
def update_post(
    post_id: int,
    post: schemas.PostUpdate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.PostDetail:
    """Edit a post. Owner, moderator or admin only."""
    PostService.update_post(db, identity, post_id, post.title, post.content)
    return PostService.get_post_detail(db, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> None:
    """Delete a post with its comments, votes, notifications and reports."""
    PostService.delete_post(db, identity, post_id)
