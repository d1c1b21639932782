from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.permissions import require_admin
from app.core.firebase import verify_firebase_token
from app.models.user import User
from app.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_user_service() -> UserService:
    """Dependency to get user service instance"""
    return UserService()


def verify_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """Verify the bearer ID token and return its decoded claims"""
    try:
        decoded_token = verify_firebase_token(credentials.credentials)
    except Exception as e:
        logger.error(f"verify_token: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    if not decoded_token.get('uid'):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decoded_token


async def get_current_user(
    decoded_token: dict = Depends(verify_token),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Dependency resolving the authenticated user from the verified token.
    Creates the user on first login and records the sign-in on later ones.
    """
    uid = decoded_token['uid']
    logger.info(f"get_current_user: Entry - {uid}")
    
    user = user_service.sync_login(
        db,
        open_id=uid,
        name=decoded_token.get('name'),
        email=decoded_token.get('email'),
    )
    logger.info(f"get_current_user: Success - {uid}, user: {user.id}")
    return user


async def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only routes, runs before any handler read or write"""
    return require_admin(current_user)
