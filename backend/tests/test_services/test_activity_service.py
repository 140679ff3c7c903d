"""Tests for ActivityService."""

import repositories.db_models as db_models
from models.domain import ActingIdentity, CommentTarget, PostTarget
from services.activity_service import ActivityService
from services.vote_service import VoteService


def _identity(user: db_models.User) -> ActingIdentity:
    return ActingIdentity(id=user.id, role=user.role)


class TestActivityService:
    def test_collects_posts_comments_and_votes(
        self, db_session, test_user, other_user, test_post, test_comment
    ):
        bob = _identity(other_user)
        VoteService.toggle_vote(db_session, bob, PostTarget(test_post.id), True)
        VoteService.toggle_vote(db_session, bob, CommentTarget(test_comment.id), False)

        alice_activity = ActivityService.get_activity(db_session, _identity(test_user))
        bob_activity = ActivityService.get_activity(db_session, bob)

        assert [p.id for p in alice_activity.posts] == [test_post.id]
        assert alice_activity.comments == []
        assert alice_activity.votes == []

        assert bob_activity.posts == []
        assert [c.content for c in bob_activity.comments] == ["Nice post!"]
        assert {(v.post_id, v.comment_id, v.is_like) for v in bob_activity.votes} == {
            (test_post.id, None, True),
            (None, test_comment.id, False),
        }

    def test_empty_for_new_user(self, db_session, admin_user):
        activity = ActivityService.get_activity(db_session, _identity(admin_user))
        assert activity.posts == []
        assert activity.comments == []
        assert activity.votes == []
