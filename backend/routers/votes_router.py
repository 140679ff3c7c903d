from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from helpers.targets import target_from_ids
from models.domain import ActingIdentity
from repositories.database import get_db
from services.vote_service import VoteService

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("", response_model=schemas.VoteCountsResponse)
def vote(
    vote: schemas.VoteCreate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.VoteCountsResponse:
    """
    Like or dislike a post or comment.

    Repeating a vote removes it; any existing vote is removed by the call.
    Returns the target's like and dislike counts afterwards.
    """
    target = target_from_ids(vote.post_id, vote.comment_id)
    counts = VoteService.toggle_vote(db, identity, target, vote.is_like)
    return schemas.VoteCountsResponse.model_validate(counts)
