"""Conversion of request fields into a vote/report target."""

from typing import Optional

from models.domain import CommentTarget, PostTarget, Target
from models.exceptions import ValidationException


def target_from_ids(post_id: Optional[int], comment_id: Optional[int]) -> Target:
    """
    Build a target from the two optional request fields.

    Raises:
        ValidationException: Neither or both fields are set
    """
    if (post_id is None) == (comment_id is None):
        raise ValidationException("Exactly one of post_id or comment_id is required")
    if post_id is not None:
        return PostTarget(post_id)
    return CommentTarget(comment_id)  # type: ignore[arg-type]
