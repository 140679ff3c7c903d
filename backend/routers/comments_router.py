from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.domain import ActingIdentity
from repositories.database import get_db
from services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=schemas.Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment: schemas.CommentCreate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> db_models.Comment:
    """Comment on a post. The post owner is notified."""
    return CommentService.add_comment(db, identity, comment.post_id, comment.content)


@router.put("/{comment_id}", response_model=schemas.Comment)
def update_comment(
    comment_id: int,
    comment: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> db_models.Comment:
    return CommentService.edit_comment(db, identity, comment_id, comment.content)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> None:
    """Delete a comment. Author, moderator or admin only."""
    CommentService.delete_comment(db, identity, comment_id)
