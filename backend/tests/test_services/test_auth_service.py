"""Tests for AuthService.authenticate."""

from datetime import timedelta

import pytest

from models.exceptions import InvalidCredentialsException, TooManyAttemptsException
from services.auth_service import AuthService
from services.login_throttle import LoginThrottle
from services.session_service import SessionService


@pytest.fixture
def throttle() -> LoginThrottle:
    return LoginThrottle(max_failures=5, window=timedelta(minutes=10))


class TestAuthenticate:
    """Tests for the login entry point."""

    def test_success_returns_valid_session(
        self, db_session, test_user, throttle
    ) -> None:
        user_session = AuthService.authenticate(
            db_session, throttle, "alice", "password123"
        )
        assert SessionService.validate(db_session, user_session.token) == test_user.id

    def test_wrong_password_is_bad_credentials(
        self, db_session, test_user, throttle
    ) -> None:
        with pytest.raises(InvalidCredentialsException):
            AuthService.authenticate(db_session, throttle, "alice", "nope-nope")

    def test_unknown_user_is_bad_credentials(self, db_session, throttle) -> None:
        with pytest.raises(InvalidCredentialsException):
            AuthService.authenticate(db_session, throttle, "ghost", "password123")

    def test_overlong_password_counts_as_failure(
        self, db_session, test_user, throttle
    ) -> None:
        with pytest.raises(InvalidCredentialsException):
            AuthService.authenticate(db_session, throttle, "alice", "\U0001F600" * 50)
        assert throttle.tracked_usernames() == 1

    def test_unknown_user_failures_count_towards_lockout(
        self, db_session, throttle
    ) -> None:
        for _ in range(5):
            with pytest.raises(InvalidCredentialsException):
                AuthService.authenticate(db_session, throttle, "ghost", "x")
        assert throttle.check_allowed("ghost") is False

    def test_sixth_attempt_with_correct_password_is_throttled(
        self, db_session, other_user, throttle
    ) -> None:
        for _ in range(5):
            with pytest.raises(InvalidCredentialsException):
                AuthService.authenticate(db_session, throttle, "bob", "wrong-pass")

        with pytest.raises(TooManyAttemptsException) as exc_info:
            AuthService.authenticate(db_session, throttle, "bob", "password123")
        assert exc_info.value.retry_after > 0

    def test_throttle_key_is_normalized(
        self, db_session, other_user, throttle
    ) -> None:
        for _ in range(5):
            with pytest.raises(InvalidCredentialsException):
                AuthService.authenticate(db_session, throttle, "BOB", "wrong-pass")

        with pytest.raises(TooManyAttemptsException):
            AuthService.authenticate(db_session, throttle, "bob", "password123")

    def test_success_clears_failures(self, db_session, test_user, throttle) -> None:
        for _ in range(4):
            with pytest.raises(InvalidCredentialsException):
                AuthService.authenticate(db_session, throttle, "alice", "wrong-pass")

        AuthService.authenticate(db_session, throttle, "alice", "password123")
        assert throttle.tracked_usernames() == 0

    def test_new_login_replaces_previous_session(
        self, db_session, test_user, throttle
    ) -> None:
        first_token = AuthService.authenticate(
            db_session, throttle, "alice", "password123"
        ).token
        second_token = AuthService.authenticate(
            db_session, throttle, "alice", "password123"
        ).token

        assert first_token != second_token
        assert SessionService.validate(db_session, second_token) == test_user.id
