"""Tests for UserRepository."""

from repositories.user_repository import UserRepository
import repositories.db_models as db_models


class TestUserRepository:
    """Test cases for UserRepository."""

    def test_get_by_username(self, db_session, test_user):
        repo = UserRepository(db_session)
        assert repo.get_by_username("alice").id == test_user.id
        assert repo.get_by_username("nobody") is None

    def test_get_by_email(self, db_session, test_user):
        repo = UserRepository(db_session)
        assert repo.get_by_email("alice@example.com").id == test_user.id

    def test_email_or_username_taken(self, db_session, test_user):
        repo = UserRepository(db_session)
        assert repo.email_or_username_taken("alice@example.com", "someone")
        assert repo.email_or_username_taken("someone@example.com", "alice")
        assert not repo.email_or_username_taken("someone@example.com", "someone")

    def test_get_role(self, db_session, moderator_user):
        repo = UserRepository(db_session)
        assert repo.get_role(moderator_user.id) == db_models.Role.MODERATOR
        assert repo.get_role(99999) is None
