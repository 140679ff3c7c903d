"""Tests for CategoryService."""

import pytest

import repositories.db_models as db_models
from models.domain import ActingIdentity
from models.exceptions import (
    AlreadyTakenException,
    PermissionDeniedException,
    ValidationException,
)
from services.category_service import CategoryService


def _identity(user: db_models.User) -> ActingIdentity:
    return ActingIdentity(id=user.id, role=user.role)


class TestCategoryService:
    """Test cases for category operations."""

    def test_admin_creates_category(self, db_session, admin_user):
        category = CategoryService.create_category(
            db_session, _identity(admin_user), "  Events "
        )
        assert category.name == "Events"
        assert [c.name for c in CategoryService.list_categories(db_session)] == [
            "Events"
        ]

    @pytest.mark.parametrize("fixture_name", ["test_user", "moderator_user"])
    def test_non_admin_cannot_create(self, request, db_session, fixture_name):
        user = request.getfixturevalue(fixture_name)
        with pytest.raises(PermissionDeniedException):
            CategoryService.create_category(db_session, _identity(user), "Events")

    def test_duplicate_name(self, db_session, admin_user, test_category):
        with pytest.raises(AlreadyTakenException):
            CategoryService.create_category(
                db_session, _identity(admin_user), "General"
            )

    @pytest.mark.parametrize("name", ["", "   ", "c" * 51])
    def test_name_bounds(self, db_session, admin_user, name):
        with pytest.raises(ValidationException):
            CategoryService.create_category(db_session, _identity(admin_user), name)

    def test_seed_defaults_is_idempotent(self, db_session, test_category):
        added = CategoryService.seed_defaults(db_session, ["General", "Help", "News"])
        again = CategoryService.seed_defaults(db_session, ["General", "Help", "News"])

        assert added == 2
        assert again == 0
        assert db_session.query(db_models.Category).count() == 3
