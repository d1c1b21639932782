"""
Tests for the persistence gateway and database resource
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.database import Database
from app.core.exceptions import UnavailableError
from app.core.gateway import PersistenceGateway
from app.models.payment_request import PaymentRequest, PaymentStatus
from app.models.subscription import Plan


@pytest.fixture
def broken_db():
    """Session whose store cannot be reached"""
    db = MagicMock(spec=Session)
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    return db


def _pending_request(gateway, user_id):
    return gateway.insert(
        PaymentRequest,
        user_id=user_id,
        plan=Plan.PRO,
        amount="19.00",
        currency="USD",
        status=PaymentStatus.PENDING,
    )


class TestDatabase:

    def test_unconfigured_session_is_unavailable(self):
        database = Database(None)

        assert not database.configured
        with pytest.raises(UnavailableError) as exc_info:
            database.session()

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail == {"kind": "Unavailable", "message": "Database not available"}

    def test_lazy_init_and_dispose(self):
        database = Database("sqlite://")
        assert database._engine is None

        session = database.session()
        session.close()
        assert database._engine is not None

        database.dispose()
        assert database._engine is None


class TestPersistenceGateway:

    def test_unreachable_store_raises_unavailable(self, broken_db):
        gateway = PersistenceGateway(broken_db)

        with pytest.raises(UnavailableError):
            gateway.find_by_id(PaymentRequest, 1)
        with pytest.raises(UnavailableError):
            gateway.list_by_status(PaymentRequest, PaymentStatus.PENDING)

    def test_conditional_update_respects_expected_state(self, db_session, user):
        gateway = PersistenceGateway(db_session)
        payment = _pending_request(gateway, user.id)

        first = gateway.update(
            PaymentRequest, payment.id, {'status': PaymentStatus.APPROVED},
            expected={'status': PaymentStatus.PENDING}
        )
        second = gateway.update(
            PaymentRequest, payment.id, {'status': PaymentStatus.REJECTED},
            expected={'status': PaymentStatus.PENDING}
        )

        assert first == 1
        assert second == 0
        assert gateway.find_by_id(PaymentRequest, payment.id).status == PaymentStatus.APPROVED

    def test_find_missing_returns_none(self, db_session):
        assert PersistenceGateway(db_session).find_by_id(PaymentRequest, 12345) is None

    def test_list_by_user_orders_newest_first(self, db_session, make_user):
        gateway = PersistenceGateway(db_session)
        owner = make_user()
        other = make_user()
        older = _pending_request(gateway, owner.id)
        _pending_request(gateway, other.id)
        newer = _pending_request(gateway, owner.id)

        rows = gateway.list_by_user(PaymentRequest, owner.id, order_by="requested_at")
        assert [r.id for r in rows] == [newer.id, older.id]

    def test_upsert_subscription_keeps_one_row(self, db_session, user):
        gateway = PersistenceGateway(db_session)

        first = gateway.upsert_subscription(user.id, {'plan': Plan.PRO})
        second = gateway.upsert_subscription(user.id, {'plan': Plan.BUSINESS})

        assert first.id == second.id
        assert gateway.find_subscription(user.id).plan == Plan.BUSINESS
