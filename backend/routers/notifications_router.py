from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.domain import ActingIdentity
from repositories.database import get_db
from services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_schema(notification: db_models.Notification) -> schemas.Notification:
    return schemas.Notification(
        id=notification.id,
        type=notification.type,
        from_user_id=notification.from_user_id,
        from_username=(
            notification.from_user.username if notification.from_user else None
        ),
        post_id=notification.post_id,
        comment_id=notification.comment_id,
        created_at=notification.created_at,
        is_read=notification.is_read,
    )


@router.get("", response_model=schemas.NotificationList)
def list_notifications(
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.NotificationList:
    """Get the current user's notifications, newest first."""
    notifications = NotificationService.list_for_user(db, identity.id)
    return schemas.NotificationList(
        notifications=[_to_schema(n) for n in notifications],
        unread_count=NotificationService.count_unread(db, identity.id),
    )


@router.post("/{notification_id}/read", response_model=schemas.Notification)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> schemas.Notification:
    return _to_schema(NotificationService.mark_read(db, identity, notification_id))
