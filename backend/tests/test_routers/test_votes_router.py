"""Integration tests for /api/votes."""

import pytest


class TestVotesRouter:
    """Test cases for the vote toggle endpoint."""

    def test_requires_login(self, client, test_post):
        response = client.post(
            "/api/votes", json={"post_id": test_post.id, "is_like": True}
        )
        assert response.status_code == 401

    def test_toggle_returns_counts(self, client, other_user, test_post, login_as):
        login_as(other_user)
        payload = {"post_id": test_post.id, "is_like": True}

        first = client.post("/api/votes", json=payload)
        second = client.post("/api/votes", json=payload)

        assert first.status_code == 200
        assert first.json() == {"likes": 1, "dislikes": 0}
        assert second.json() == {"likes": 0, "dislikes": 0}

    def test_comment_vote(self, client, test_user, test_comment, login_as):
        login_as(test_user)

        response = client.post(
            "/api/votes", json={"comment_id": test_comment.id, "is_like": False}
        )
        assert response.json() == {"likes": 0, "dislikes": 1}

    @pytest.mark.parametrize("with_post,with_comment", [(False, False), (True, True)])
    def test_exactly_one_target_required(
        self, client, test_user, test_post, test_comment, login_as, with_post, with_comment
    ):
        login_as(test_user)
        payload = {"is_like": True}
        if with_post:
            payload["post_id"] = test_post.id
        if with_comment:
            payload["comment_id"] = test_comment.id

        response = client.post("/api/votes", json=payload)

        assert response.status_code == 400

    def test_missing_target(self, client, test_user, login_as):
        login_as(test_user)
        response = client.post("/api/votes", json={"post_id": 99999, "is_like": True})
        assert response.status_code == 404
