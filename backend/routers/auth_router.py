"""Authentication router endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import limiter
from helpers.time_utils import ensure_utc
from models.config import settings
from models.domain import ActingIdentity
from repositories.database import get_db
from repositories.user_repository import UserRepository
from services.auth_service import AuthService
from services.credential_service import CredentialService
from services.login_throttle import LoginThrottle
from services.session_service import SessionService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
def register(
    request: Request, user: schemas.UserCreate, db: Session = Depends(get_db)
) -> db_models.User:
    """
    Register a new user.

    Email and username are matched case-insensitively. Rate limited per
    client address.
    """
    return CredentialService.register(db, user.email, user.username, user.password)


@router.post("/login", response_model=schemas.LoginResponse)
def login(
    credentials: schemas.UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    throttle: LoginThrottle = Depends(auth.get_login_throttle),
) -> schemas.LoginResponse:
    """
    Log in and receive the session cookie.

    Any previous session of the same user stops working.
    """
    user_session = AuthService.authenticate(
        db, throttle, credentials.username, credentials.password
    )
    expires_at = ensure_utc(user_session.expires_at)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=user_session.token,
        expires=expires_at,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return schemas.LoginResponse(
        user=schemas.User.model_validate(user_session.user),
        expires_at=expires_at,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    response: Response,
    token: Optional[str] = Depends(auth.get_session_token),
    db: Session = Depends(get_db),
) -> None:
    """Revoke the current session. Safe to call without one."""
    SessionService.revoke(db, token or "")
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")


@router.get("/me", response_model=schemas.User)
def read_users_me(
    identity: ActingIdentity = Depends(auth.get_acting_identity),
    db: Session = Depends(get_db),
) -> Optional[db_models.User]:
    return UserRepository(db).get_by_id(identity.id)
