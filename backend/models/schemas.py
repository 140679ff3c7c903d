from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.domain import Role
from repositories.db_models import NotificationKind, ReportStatus


class PostSortOrder(str, Enum):
    """Post listing order."""

    DATE = "date"
    LIKES = "likes"


# User Schemas
class UserBase(BaseModel):
    email: str
    username: str


class UserCreate(UserBase):
    password: str


class UserLogin(BaseModel):
    username: str
    password: str


class User(UserBase):
    id: int
    role: Role
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Identity(BaseModel):
    """Who the current session belongs to."""

    id: int
    role: Role

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    user: User
    expires_at: datetime


# Category Schemas
class CategoryBase(BaseModel):
    name: str


class CategoryCreate(CategoryBase):
    pass


class Category(CategoryBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


# Post Schemas
class PostBase(BaseModel):
    title: str
    content: str


class PostCreate(PostBase):
    category_ids: List[int] = Field(default_factory=list)
    image_path: Optional[str] = Field(
        default=None, description="Path of an already stored upload"
    )


class PostUpdate(PostBase):
    pass


class PostSummary(BaseModel):
    id: int
    title: str
    content: str
    user_id: int
    author_username: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    category: Optional[str] = None
    categories: List[Category] = []
    image_path: Optional[str] = None
    likes: int = 0
    dislikes: int = 0


class CommentView(BaseModel):
    id: int
    post_id: int
    user_id: int
    author_username: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    likes: int = 0
    dislikes: int = 0


class PostDetail(PostSummary):
    comments: List[CommentView] = []
    my_vote: Optional[bool] = None


# Comment Schemas
class CommentBase(BaseModel):
    content: str


class CommentCreate(CommentBase):
    post_id: int


class CommentUpdate(CommentBase):
    pass


class Comment(CommentBase):
    id: int
    post_id: int
    user_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Vote Schemas
class VoteCreate(BaseModel):
    """Exactly one of post_id / comment_id must be set."""

    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    is_like: bool


class Vote(BaseModel):
    id: int
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    is_like: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VoteCountsResponse(BaseModel):
    likes: int
    dislikes: int

    model_config = ConfigDict(from_attributes=True)


# Notification Schemas
class Notification(BaseModel):
    id: int
    type: NotificationKind
    from_user_id: Optional[int] = None
    from_username: Optional[str] = None
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    created_at: datetime
    is_read: bool


class NotificationList(BaseModel):
    notifications: List[Notification]
    unread_count: int


# Report Schemas
class ReportCreate(BaseModel):
    """Exactly one of post_id / comment_id must be set."""

    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    reason: str


class Report(BaseModel):
    id: int
    reporter_id: int
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    reason: str
    status: ReportStatus
    created_at: datetime
    closed_at: Optional[datetime] = None
    closed_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


# Activity Schemas
class PostRef(BaseModel):
    id: int
    title: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserActivity(BaseModel):
    posts: List[PostRef]
    comments: List[Comment]
    votes: List[Vote]
