"""
Integration tests for database constraints
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.payment_request import PaymentRequest, PaymentStatus
from app.models.subscription import Plan, Subscription, SubscriptionStatus
from app.models.user import User


@pytest.mark.integration
class TestDatabaseIntegration:
    """Integration tests for database operations"""

    def test_open_id_is_unique(self, db_session: Session):
        db_session.add(User(open_id="dup", last_signed_in=datetime.utcnow()))
        db_session.commit()

        db_session.add(User(open_id="dup", last_signed_in=datetime.utcnow()))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_one_subscription_per_user(self, db_session: Session, user):
        db_session.add(Subscription(user_id=user.id, plan=Plan.PRO))
        db_session.commit()

        db_session.add(Subscription(user_id=user.id, plan=Plan.BUSINESS))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_defaults(self, db_session: Session, user):
        subscription = Subscription(user_id=user.id)
        payment = PaymentRequest(user_id=user.id, plan=Plan.PRO, amount="19.00")
        db_session.add_all([subscription, payment])
        db_session.commit()

        assert subscription.plan == Plan.FREE
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert payment.status == PaymentStatus.PENDING
        assert payment.currency == "USD"
        assert payment.requested_at is not None

    def test_user_relationships(self, db_session: Session, user):
        db_session.add(PaymentRequest(user_id=user.id, plan=Plan.PRO, amount="19.00"))
        db_session.add(Subscription(user_id=user.id, plan=Plan.PRO))
        db_session.commit()
        db_session.refresh(user)

        assert len(user.payment_requests) == 1
        assert user.subscription.plan == Plan.PRO
