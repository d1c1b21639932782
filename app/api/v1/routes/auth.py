from fastapi import APIRouter, Depends
from app.core.middleware import get_current_user
from app.models.user import User
from app.services.user_service import UserResponse

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user, creating it on first login"""
    return current_user
