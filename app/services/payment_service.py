import logging
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (InvalidStateError, NotFoundError,
                                 UnauthorizedError, ValidationFailedError)
from app.core.gateway import PersistenceGateway
from app.core.permissions import require_admin
from app.models.payment_request import PaymentRequest, PaymentStatus
from app.models.subscription import Plan
from app.models.user import User
from app.services.subscription_service import (PLAN_CURRENCY,
                                               SubscriptionService, plan_price)

logger = logging.getLogger(__name__)

UPGRADE_PLANS = (Plan.PRO, Plan.BUSINESS)


class PaymentRequestResponse(BaseModel):
    id: int
    user_id: int
    plan: Plan
    amount: str
    currency: str
    status: PaymentStatus
    payment_proof: Optional[str] = None
    notes: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentService:
    """
    Manual bank-transfer upgrade workflow.

    A request starts pending without proof, the owner attaches proof while it
    is still pending, and an admin moves it once to approved or rejected.
    Approval activates the owner's subscription in the same transaction.
    """

    def __init__(self, subscription_service: Optional[SubscriptionService] = None):
        self.subscriptions = subscription_service or SubscriptionService()
        self.logger = logging.getLogger(__name__)

    def request_upgrade(self, db: Session, user: User, plan: Plan) -> PaymentRequest:
        """Open a pending payment request for an upgrade to ``plan``"""
        self.logger.info(f"request_upgrade: Entry - user: {user.id}, plan: {plan}")

        try:
            if plan not in UPGRADE_PLANS:
                raise ValidationFailedError(f"Unsupported plan for upgrade: {plan}")

            current = self.subscriptions.get_current_subscription(db, user)
            if current.plan == plan:
                raise InvalidStateError(f"Already subscribed to the {plan.value} plan")

            payment = PersistenceGateway(db).insert(
                PaymentRequest,
                user_id=user.id,
                plan=plan,
                amount=plan_price(plan),
                currency=PLAN_CURRENCY,
                status=PaymentStatus.PENDING,
                requested_at=datetime.utcnow()
            )
            db.commit()
            db.refresh(payment)

            self.logger.info(f"request_upgrade: Success - user: {user.id}, payment: {payment.id}")
            return payment
        except Exception as e:
            db.rollback()
            self.logger.error(f"request_upgrade: Failure - {e}")
            raise

    def list_for_user(self, db: Session, user: User) -> list[PaymentRequest]:
        """Caller's payment requests, most recently requested first"""
        self.logger.info(f"list_for_user: Entry - user: {user.id}")

        try:
            payments = PersistenceGateway(db).list_by_user(PaymentRequest, user.id, order_by="requested_at")
            self.logger.info(f"list_for_user: Success - user: {user.id}, count: {len(payments)}")
            return payments
        except Exception as e:
            self.logger.error(f"list_for_user: Failure - {e}")
            raise

    def submit_proof(
        self,
        db: Session,
        user: User,
        payment_id: int,
        payment_proof: Optional[str] = None,
        notes: Optional[str] = None
    ) -> PaymentRequest:
        """Attach proof of payment and notes to the caller's pending request"""
        self.logger.info(f"submit_proof: Entry - user: {user.id}, payment: {payment_id}")

        try:
            if payment_proof is None and notes is None:
                raise ValidationFailedError("Nothing to update: provide payment_proof or notes")
            if payment_proof is not None and not payment_proof.strip():
                raise ValidationFailedError("Payment proof must not be empty")

            gateway = PersistenceGateway(db)
            payment = gateway.find_by_id(PaymentRequest, payment_id)
            if payment is None:
                raise NotFoundError(f"Payment request not found: {payment_id}")
            if payment.user_id != user.id:
                raise UnauthorizedError("Payment request belongs to another user")
            if payment.status != PaymentStatus.PENDING:
                raise InvalidStateError(f"Payment request is already {payment.status.value}")

            patch = {}
            if payment_proof is not None:
                patch['payment_proof'] = payment_proof.strip()
            if notes is not None:
                patch['notes'] = notes

            updated = gateway.update(
                PaymentRequest, payment_id, patch,
                expected={'status': PaymentStatus.PENDING, 'user_id': user.id}
            )
            if updated == 0:
                raise InvalidStateError("Payment request was decided concurrently")

            db.commit()
            db.refresh(payment)

            self.logger.info(f"submit_proof: Success - payment: {payment_id}")
            return payment
        except Exception as e:
            db.rollback()
            self.logger.error(f"submit_proof: Failure - {e}")
            raise

    def admin_decide(self, db: Session, admin: User, payment_id: int, approved: bool) -> PaymentRequest:
        """
        Approve or reject a pending request.

        The transition is a conditional update on status == pending, so of two
        concurrent decisions only one changes the row and only that one
        activates the subscription. The other fails with InvalidStateError.
        """
        require_admin(admin)
        self.logger.info(f"admin_decide: Entry - admin: {admin.id}, payment: {payment_id}, approved: {approved}")

        try:
            gateway = PersistenceGateway(db)
            payment = gateway.find_by_id(PaymentRequest, payment_id)
            if payment is None:
                raise NotFoundError(f"Payment request not found: {payment_id}")
            if payment.status != PaymentStatus.PENDING:
                raise InvalidStateError(f"Payment request is already {payment.status.value}")

            owner_id = payment.user_id
            plan = payment.plan
            now = datetime.utcnow()

            patch = {'status': PaymentStatus.APPROVED if approved else PaymentStatus.REJECTED}
            if approved:
                patch['approved_at'] = now

            updated = gateway.update(
                PaymentRequest, payment_id, patch,
                expected={'status': PaymentStatus.PENDING}
            )
            if updated == 0:
                raise InvalidStateError("Payment request was decided concurrently")

            if approved:
                self.subscriptions.activate(
                    gateway,
                    user_id=owner_id,
                    plan=plan,
                    period_start=now,
                    period_end=now + timedelta(days=settings.subscription_period_days)
                )

            db.commit()
            db.refresh(payment)

            self.logger.info(
                f"admin_decide: Success - payment: {payment_id}, status: {payment.status.value}, owner: {owner_id}")
            return payment
        except Exception as e:
            db.rollback()
            self.logger.error(f"admin_decide: Failure - {e}")
            raise

    def list_pending(self, db: Session, admin: User) -> list[PaymentRequest]:
        """All pending requests across users, most recently requested first"""
        require_admin(admin)
        self.logger.info(f"list_pending: Entry - admin: {admin.id}")

        try:
            payments = PersistenceGateway(db).list_by_status(
                PaymentRequest, PaymentStatus.PENDING, order_by="requested_at")
            self.logger.info(f"list_pending: Success - count: {len(payments)}")
            return payments
        except Exception as e:
            self.logger.error(f"list_pending: Failure - {e}")
            raise
