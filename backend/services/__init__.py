"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .activity_service import ActivityService
from .auth_service import AuthService
from .category_service import CategoryService
from .comment_service import CommentService
from .credential_service import CredentialService
from .login_throttle import LoginThrottle
from .notification_service import NotificationService
from .post_service import PostService
from .report_service import ReportService
from .session_service import SessionService
from .vote_service import VoteService

__all__ = [
    "ActivityService",
    "AuthService",
    "CategoryService",
    "CommentService",
    "CredentialService",
    "LoginThrottle",
    "NotificationService",
    "PostService",
    "ReportService",
    "SessionService",
    "VoteService",
]
