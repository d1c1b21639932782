from app.core.exceptions import UnauthorizedError
from app.models.user import User
import logging

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    """Check whether the user holds the admin role"""
    return user is not None and user.is_admin


def require_admin(user: User) -> User:
    """Fail with UnauthorizedError unless the user holds the admin role"""
    if not is_admin(user):
        logger.warning(f"require_admin: Unauthorized - user: {getattr(user, 'id', None)}")
        raise UnauthorizedError("Admin access required")
    return user
