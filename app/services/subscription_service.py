import logging
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ValidationFailedError
from app.core.gateway import PersistenceGateway
from app.models.subscription import Plan, Subscription, SubscriptionStatus
from app.models.user import User

logger = logging.getLogger(__name__)


PLAN_CATALOG = {
    Plan.FREE: {
        'name': 'Free',
        'price': '0.00',
        'features': [
            'Up to 10 scheduled posts per month',
            '2 social platforms',
            'Basic content calendar',
        ],
        'recommended': False,
    },
    Plan.PRO: {
        'name': 'Pro',
        'price': '19.00',
        'features': [
            'Unlimited scheduled posts',
            'All social platforms',
            'Content templates library',
            'Priority support',
        ],
        'recommended': True,
    },
    Plan.BUSINESS: {
        'name': 'Business',
        'price': '49.00',
        'features': [
            'Everything in Pro',
            'Team collaboration',
            'Advanced analytics',
            'Dedicated account manager',
        ],
        'recommended': False,
    },
}

PLAN_CURRENCY = "USD"


class PlanResponse(BaseModel):
    """Pydantic model for plan API response"""
    tier: Plan
    name: str
    price: str
    currency: str = PLAN_CURRENCY
    features: list[str]
    recommended: bool = False


class SubscriptionResponse(BaseModel):
    """Current subscription, or the implicit free plan when no row exists"""
    plan: Plan
    status: SubscriptionStatus
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    id: Optional[int] = None
    user_id: Optional[int] = None

    class Config:
        from_attributes = True


class SubscriptionUpdate(BaseModel):
    """Explicit shape accepted by the subscription projection"""
    plan: Plan
    status: Optional[SubscriptionStatus] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None


DEFAULT_SUBSCRIPTION = SubscriptionResponse(plan=Plan.FREE, status=SubscriptionStatus.ACTIVE)


def plan_price(plan: Plan) -> str:
    return PLAN_CATALOG[plan]['price']


class SubscriptionService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def get_all_plans(self) -> list[PlanResponse]:
        """Get the static plan catalog, cheapest first"""
        return [
            PlanResponse(tier=tier, **plan)
            for tier, plan in PLAN_CATALOG.items()
        ]

    def get_current_subscription(self, db: Session, user: User) -> SubscriptionResponse:
        """Get user's current subscription. Pure read."""
        self.logger.info(f"get_current_subscription: Entry - user: {user.id}")

        try:
            subscription = PersistenceGateway(db).find_subscription(user.id)
            if subscription is None:
                self.logger.info(f"get_current_subscription: Success - user: {user.id}, implicit free")
                return DEFAULT_SUBSCRIPTION.model_copy()

            self.logger.info(
                f"get_current_subscription: Success - user: {user.id}, plan: {subscription.plan.value}")
            return SubscriptionResponse.model_validate(subscription)
        except Exception as e:
            self.logger.error(f"get_current_subscription: Failure - {e}")
            raise

    def activate(
        self,
        gateway: PersistenceGateway,
        user_id: int,
        plan: Plan,
        period_start: datetime,
        period_end: Optional[datetime] = None,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    ) -> Subscription:
        """
        Upsert the user's subscription row inside the caller's transaction.
        The caller commits.
        """
        if period_end is None:
            period_end = period_start + timedelta(days=settings.subscription_period_days)
        if period_end < period_start:
            raise ValidationFailedError("Subscription period must end after it starts")

        self.logger.info(f"activate: Entry - user: {user_id}, plan: {plan.value}")
        subscription = gateway.upsert_subscription(user_id, {
            'plan': plan,
            'status': status,
            'current_period_start': period_start,
            'current_period_end': period_end,
        })
        self.logger.info(f"activate: Success - user: {user_id}, subscription: {subscription.id}")
        return subscription

    def update_subscription(self, db: Session, user: User, update: SubscriptionUpdate) -> SubscriptionResponse:
        """
        Create or update the caller's subscription from an explicit update.

        Only fields set on ``update`` are written; the rest keep their stored
        values. A new row starts ``active`` unless a status is given.
        """
        self.logger.info(f"update_subscription: Entry - user: {user.id}, plan: {update.plan.value}")

        try:
            changes = update.model_dump(exclude_unset=True)
            if 'status' in changes and changes['status'] is None:
                raise ValidationFailedError("Subscription status must not be null")

            gateway = PersistenceGateway(db)
            existing = gateway.find_subscription(user.id)
            period_start = changes.get(
                'current_period_start', existing.current_period_start if existing else None)
            period_end = changes.get(
                'current_period_end', existing.current_period_end if existing else None)
            if period_start is not None and period_end is not None and period_end < period_start:
                raise ValidationFailedError("Subscription period must end after it starts")

            if existing is None:
                changes.setdefault('status', SubscriptionStatus.ACTIVE)
            subscription = gateway.upsert_subscription(user.id, changes)
            db.commit()
            db.refresh(subscription)

            self.logger.info(f"update_subscription: Success - user: {user.id}, subscription: {subscription.id}")
            return SubscriptionResponse.model_validate(subscription)
        except Exception as e:
            db.rollback()
            self.logger.error(f"update_subscription: Failure - {e}")
            raise
