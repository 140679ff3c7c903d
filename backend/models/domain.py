"""
Plain domain values passed between the authorization layer and services.

None of these are ORM objects. A service receives who is acting and what they
act on without touching the request or the session table.
"""

import enum
from dataclasses import dataclass
from typing import Union


class Role(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class Capability(str, enum.Enum):
    """What a caller must be able to do for an operation to proceed."""

    AUTHENTICATED = "authenticated"
    MODERATE = "moderate"
    ADMINISTER = "administer"


@dataclass(frozen=True)
class ActingIdentity:
    """The authenticated user performing a request."""

    id: int
    role: Role

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins share moderation rights."""
        return self.role in (Role.MODERATOR, Role.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_modify(self, owner_id: int) -> bool:
        """Owners may change their content; moderators may change anyone's."""
        return self.id == owner_id or self.is_moderator

    def has(self, capability: Capability) -> bool:
        if capability == Capability.ADMINISTER:
            return self.is_admin
        if capability == Capability.MODERATE:
            return self.is_moderator
        return True


@dataclass(frozen=True)
class PostTarget:
    id: int


@dataclass(frozen=True)
class CommentTarget:
    id: int


Target = Union[PostTarget, CommentTarget]


@dataclass(frozen=True)
class VoteCounts:
    """Like/dislike totals for one target after a vote transition."""

    likes: int
    dislikes: int
