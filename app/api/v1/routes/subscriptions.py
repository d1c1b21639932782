import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.middleware import get_current_user
from app.models.user import User
from app.services.subscription_service import (PlanResponse,
                                               SubscriptionResponse,
                                               SubscriptionService,
                                               SubscriptionUpdate)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_subscription_service() -> SubscriptionService:
    """Dependency to get subscription service instance"""
    return SubscriptionService()


@router.get("/plans")
async def get_plans(
    subscription_service: SubscriptionService = Depends(get_subscription_service)
) -> dict[str, list[PlanResponse]]:
    """
    Get all available subscription plans.
    Public endpoint - no authentication required.
    """
    plans = subscription_service.get_all_plans()
    logger.info(f"get_plans: Success - {len(plans)} plans")
    return {"plans": plans}


@router.get("/current", response_model=SubscriptionResponse)
async def get_current_subscription(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Get current user's subscription, or the implicit free plan.
    Requires authentication.
    """
    try:
        return subscription_service.get_current_subscription(db, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"get_current_subscription: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.put("/current", response_model=SubscriptionResponse)
async def update_subscription(
    request: SubscriptionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Create or update the current user's subscription.
    Requires authentication.
    """
    logger.info(f"update_subscription: Entry - user: {current_user.id}, plan: {request.plan.value}")

    try:
        return subscription_service.update_subscription(db, current_user, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"update_subscription: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
