from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from models.domain import ActingIdentity
from repositories.database import get_db
from services.activity_service import ActivityService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/activity", response_model=schemas.UserActivity)
def get_my_activity(
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.UserActivity:
    """Get the current user's posts, comments and votes."""
    return ActivityService.get_activity(db, identity)
