"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .category_repository import CategoryRepository
from .comment_repository import CommentRepository
from .notification_repository import NotificationRepository
from .post_repository import PostRepository
from .report_repository import ReportRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository
from .vote_repository import VoteRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "CommentRepository",
    "NotificationRepository",
    "PostRepository",
    "ReportRepository",
    "SessionRepository",
    "UserRepository",
    "VoteRepository",
]
