"""Tests for VoteService."""

import pytest

import repositories.db_models as db_models
from models.domain import ActingIdentity, CommentTarget, PostTarget, VoteCounts
from models.exceptions import (
    CommentNotFoundException,
    DuplicateVoteException,
    PostNotFoundException,
)
from repositories.vote_repository import VoteRepository
from services.vote_service import VoteService


def _identity(user: db_models.User) -> ActingIdentity:
    return ActingIdentity(id=user.id, role=user.role)


def _notifications(db_session) -> list:
    return db_session.query(db_models.Notification).all()


class TestToggleVote:
    """Test cases for the like/dislike toggle."""

    def test_first_like_is_inserted(self, db_session, other_user, test_post):
        counts = VoteService.toggle_vote(
            db_session, _identity(other_user), PostTarget(test_post.id), True
        )

        assert counts == VoteCounts(likes=1, dislikes=0)

    def test_second_like_removes_vote(self, db_session, other_user, test_post):
        actor = _identity(other_user)
        target = PostTarget(test_post.id)

        VoteService.toggle_vote(db_session, actor, target, True)
        counts = VoteService.toggle_vote(db_session, actor, target, True)

        assert counts == VoteCounts(likes=0, dislikes=0)
        assert VoteRepository(db_session).get_user_vote(other_user.id, target) is None

    def test_dislike_after_like_removes_instead_of_switching(
        self, db_session, other_user, test_post
    ):
        """Any existing vote is removed, whatever kind is requested."""
        actor = _identity(other_user)
        target = PostTarget(test_post.id)

        VoteService.toggle_vote(db_session, actor, target, True)
        counts = VoteService.toggle_vote(db_session, actor, target, False)
        assert counts == VoteCounts(likes=0, dislikes=0)

        counts = VoteService.toggle_vote(db_session, actor, target, False)
        assert counts == VoteCounts(likes=0, dislikes=1)

    def test_counts_include_other_voters(
        self, db_session, test_user, other_user, moderator_user, test_post
    ):
        target = PostTarget(test_post.id)
        VoteService.toggle_vote(db_session, _identity(other_user), target, True)
        VoteService.toggle_vote(db_session, _identity(moderator_user), target, False)
        counts = VoteService.toggle_vote(db_session, _identity(test_user), target, True)

        assert counts == VoteCounts(likes=2, dislikes=1)

    def test_comment_vote_is_independent_of_post_vote(
        self, db_session, test_user, test_post, test_comment
    ):
        actor = _identity(test_user)
        VoteService.toggle_vote(db_session, actor, PostTarget(test_post.id), True)
        counts = VoteService.toggle_vote(
            db_session, actor, CommentTarget(test_comment.id), False
        )

        assert counts == VoteCounts(likes=0, dislikes=1)
        assert VoteService.get_counts(
            db_session, PostTarget(test_post.id)
        ) == VoteCounts(likes=1, dislikes=0)

    def test_missing_post(self, db_session, test_user):
        with pytest.raises(PostNotFoundException):
            VoteService.toggle_vote(
                db_session, _identity(test_user), PostTarget(99999), True
            )
        assert db_session.query(db_models.Vote).count() == 0

    def test_missing_comment(self, db_session, test_user):
        with pytest.raises(CommentNotFoundException):
            VoteService.toggle_vote(
                db_session, _identity(test_user), CommentTarget(99999), True
            )

    def test_concurrent_insert_is_reported_as_duplicate(
        self, db_session, other_user, test_post, monkeypatch
    ):
        """A racing request inserts first; our insert hits the unique index."""
        target = PostTarget(test_post.id)
        db_session.add(
            db_models.Vote(user_id=other_user.id, post_id=test_post.id, is_like=True)
        )
        db_session.commit()
        monkeypatch.setattr(VoteRepository, "get_user_vote", lambda *a, **k: None)

        with pytest.raises(DuplicateVoteException):
            VoteService.toggle_vote(db_session, _identity(other_user), target, True)

        assert VoteService.get_counts(db_session, target) == VoteCounts(1, 0)


class TestVoteNotifications:
    """Notification fan-out for votes."""

    def test_like_notifies_post_owner(
        self, db_session, test_user, other_user, test_post
    ):
        VoteService.toggle_vote(
            db_session, _identity(other_user), PostTarget(test_post.id), True
        )

        notifications = _notifications(db_session)
        assert len(notifications) == 1
        assert notifications[0].user_id == test_user.id
        assert notifications[0].from_user_id == other_user.id
        assert notifications[0].type == db_models.NotificationKind.LIKE
        assert notifications[0].post_id == test_post.id

    def test_dislike_on_comment_notifies_comment_owner(
        self, db_session, test_user, other_user, test_comment
    ):
        VoteService.toggle_vote(
            db_session, _identity(test_user), CommentTarget(test_comment.id), False
        )

        notifications = _notifications(db_session)
        assert len(notifications) == 1
        assert notifications[0].user_id == other_user.id
        assert notifications[0].type == db_models.NotificationKind.DISLIKE
        assert notifications[0].comment_id == test_comment.id
        assert notifications[0].post_id is None

    def test_undo_does_not_notify(self, db_session, other_user, test_post):
        actor = _identity(other_user)
        target = PostTarget(test_post.id)

        VoteService.toggle_vote(db_session, actor, target, True)
        VoteService.toggle_vote(db_session, actor, target, True)

        assert len(_notifications(db_session)) == 1

    def test_voting_on_own_post_does_not_notify(
        self, db_session, test_user, test_post
    ):
        VoteService.toggle_vote(
            db_session, _identity(test_user), PostTarget(test_post.id), True
        )

        assert _notifications(db_session) == []
