"""
Tests for login bookkeeping and the admin guard
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from app.core.exceptions import UnauthorizedError, UnavailableError
from app.core.permissions import is_admin, require_admin
from app.models.user import User, UserRole
from app.services.user_service import UserService


@pytest.fixture
def service():
    return UserService()


class TestSyncLogin:

    def test_first_login_creates_user(self, service, db_session):
        user = service.sync_login(db_session, open_id="new-uid", name="New", email="new@example.com")

        assert user.id is not None
        assert user.role == UserRole.USER
        assert db_session.query(User).filter(User.open_id == "new-uid").count() == 1

    def test_owner_becomes_admin(self, service, db_session):
        user = service.sync_login(db_session, open_id="owner-uid")

        assert user.role == UserRole.ADMIN

    def test_later_login_updates_profile_and_timestamp(self, service, db_session, user):
        before = user.last_signed_in

        same = service.sync_login(db_session, open_id=user.open_id, email="changed@example.com")

        assert same.id == user.id
        db_session.refresh(same)
        assert same.email == "changed@example.com"
        assert same.last_signed_in >= before
        assert db_session.query(User).count() == 1

    def test_bookkeeping_failure_does_not_block_login(self, service, db_session, user):
        with patch(
            "app.services.user_service.PersistenceGateway.update",
            side_effect=UnavailableError("Database not available")
        ):
            resolved = service.sync_login(db_session, open_id=user.open_id)

        assert resolved.id == user.id

    def test_user_from_failed_bookkeeping_needs_no_reload(self, service, db_session, user):
        with patch(
            "app.services.user_service.PersistenceGateway.update",
            side_effect=UnavailableError("Database not available")
        ):
            resolved = service.sync_login(db_session, open_id=user.open_id)

        # Store is gone from here on: reading the resolved user must not query it
        with patch.object(db_session, "execute", side_effect=OperationalError("SELECT", {}, Exception("down"))):
            assert resolved.open_id == user.open_id
            assert resolved.role == UserRole.USER
            assert resolved.email is not None

        assert inspect(resolved).detached

    def test_creation_failure_propagates(self, service, db_session):
        with patch(
            "app.services.user_service.PersistenceGateway.insert",
            side_effect=UnavailableError("Database not available")
        ):
            with pytest.raises(UnavailableError):
                service.sync_login(db_session, open_id="brand-new")

    def test_set_role(self, service, db_session, user):
        service.set_role(db_session, user, UserRole.ADMIN)

        assert service.get_user(db_session, user_id=user.id).is_admin


class TestAdminGuard:

    def test_admin_passes(self):
        admin = MagicMock(spec=User)
        admin.is_admin = True

        assert require_admin(admin) is admin
        assert is_admin(admin)

    def test_user_is_refused(self):
        user = MagicMock(spec=User)
        user.id = 7
        user.is_admin = False

        with pytest.raises(UnauthorizedError) as exc_info:
            require_admin(user)

        assert exc_info.value.detail["kind"] == "Unauthorized"

    def test_missing_user_is_refused(self):
        with pytest.raises(UnauthorizedError):
            require_admin(None)
