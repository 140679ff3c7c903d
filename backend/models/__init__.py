"""Models package - settings, Pydantic schemas, domain values and exceptions."""

from .domain import (
    ActingIdentity,
    Capability,
    CommentTarget,
    PostTarget,
    Role,
    Target,
    VoteCounts,
)

__all__ = [
    "ActingIdentity",
    "Capability",
    "CommentTarget",
    "PostTarget",
    "Role",
    "Target",
    "VoteCounts",
]
