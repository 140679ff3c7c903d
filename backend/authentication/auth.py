"""
Authorization guard.

Turns the session cookie into an ActingIdentity and checks capabilities.
authorize() is HTTP-agnostic; the get_*_identity functions wrap it as FastAPI
dependencies for routers.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from models.config import settings
from models.domain import ActingIdentity, Capability
from models.exceptions import (
    AuthenticationException,
    PermissionDeniedException,
    SessionNotFoundException,
)
from repositories.database import get_db
from repositories.user_repository import UserRepository
from services.login_throttle import LoginThrottle
from services.session_service import SessionService


def authorize(
    db: Session,
    token: Optional[str],
    capability: Capability = Capability.AUTHENTICATED,
) -> ActingIdentity:
    """
    Resolve a session token to the acting user and check a capability.

    Args:
        db: Database session
        token: Session token from the client, may be None
        capability: What the caller needs to be allowed to do

    Returns:
        ActingIdentity with the user's current role

    Raises:
        SessionNotFoundException: No token, unknown token, or owner deleted
        SessionExpiredException: Session expired
        PermissionDeniedException: Role lacks the capability
    """
    user_id = SessionService.validate(db, token or "")
    role = UserRepository(db).get_role(user_id)
    if role is None:
        raise SessionNotFoundException()

    identity = ActingIdentity(id=user_id, role=role)
    if not identity.has(capability):
        raise PermissionDeniedException("Not enough permissions")
    return identity


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_acting_identity(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> ActingIdentity:
    """Require a signed-in user."""
    return authorize(db, token, Capability.AUTHENTICATED)


def get_optional_identity(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> Optional[ActingIdentity]:
    """
    Get the acting user if the cookie holds a valid session, otherwise None.

    Anonymous pages render the same for missing, unknown and expired tokens.
    """
    if not token:
        return None
    try:
        return authorize(db, token, Capability.AUTHENTICATED)
    except AuthenticationException:
        return None


def get_moderator_identity(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> ActingIdentity:
    """Require a moderator or admin."""
    return authorize(db, token, Capability.MODERATE)


def get_admin_identity(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> ActingIdentity:
    """Require an admin."""
    return authorize(db, token, Capability.ADMINISTER)


def get_login_throttle(request: Request) -> LoginThrottle:
    """Return the throttle created at startup and stored on app.state."""
    return request.app.state.login_throttle
