import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.middleware import get_admin_user, get_current_user
from app.models.subscription import Plan
from app.models.user import User
from app.services.payment_service import PaymentRequestResponse, PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_payment_service() -> PaymentService:
    """Dependency to get payment service instance"""
    return PaymentService()


class UpgradeRequest(BaseModel):
    plan: Plan


class UpdatePaymentRequest(BaseModel):
    payment_proof: Optional[str] = None  # URL to proof of bank transfer
    notes: Optional[str] = None


class AdminDecisionRequest(BaseModel):
    payment_id: int
    approved: bool


def _internal_error(operation: str, e: Exception) -> HTTPException:
    logger.error(f"{operation}: Failure - {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e)
    )


@router.post("/requests", response_model=PaymentRequestResponse, status_code=status.HTTP_201_CREATED)
async def request_upgrade(
    request: UpgradeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    Open a manual bank-transfer payment request for a plan upgrade.
    Requires authentication.
    """
    logger.info(f"request_upgrade: Entry - user: {current_user.id}, plan: {request.plan.value}")

    try:
        payment = payment_service.request_upgrade(db, current_user, request.plan)
        logger.info(f"request_upgrade: Success - payment: {payment.id}")
        return payment
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("request_upgrade", e)


@router.get("/requests", response_model=list[PaymentRequestResponse])
async def get_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    List the caller's payment requests, newest first.
    Requires authentication.
    """
    try:
        return payment_service.list_for_user(db, current_user)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("get_requests", e)


@router.patch("/requests/{payment_id}", response_model=PaymentRequestResponse)
async def update_request(
    payment_id: int,
    request: UpdatePaymentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    Attach proof of payment and notes to one of the caller's pending requests.
    Requires authentication and ownership of the request.
    """
    logger.info(f"update_request: Entry - user: {current_user.id}, payment: {payment_id}")

    try:
        payment = payment_service.submit_proof(
            db,
            current_user,
            payment_id,
            payment_proof=request.payment_proof,
            notes=request.notes
        )
        logger.info(f"update_request: Success - payment: {payment_id}")
        return payment
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("update_request", e)


@router.post("/admin/decide", response_model=PaymentRequestResponse)
async def admin_decide(
    request: AdminDecisionRequest,
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    Approve or reject a pending payment request.
    Approval activates the owner's subscription.
    Admin only.
    """
    logger.info(f"admin_decide: Entry - payment: {request.payment_id}, approved: {request.approved}")

    try:
        payment = payment_service.admin_decide(db, admin, request.payment_id, request.approved)
        logger.info(f"admin_decide: Success - payment: {payment.id}, status: {payment.status.value}")
        return payment
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("admin_decide", e)


@router.get("/admin/pending", response_model=list[PaymentRequestResponse])
async def admin_get_pending(
    admin: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    List pending payment requests of all users, newest first.
    Admin only.
    """
    try:
        return payment_service.list_pending(db, admin)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("admin_get_pending", e)
