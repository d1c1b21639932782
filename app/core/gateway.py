from functools import wraps
from typing import Any, Dict, Optional, Type, TypeVar
import logging

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.core.database import Base
from app.core.exceptions import UnavailableError
from app.models.subscription import Subscription
from app.models.user import User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _surface_unavailable(func):
    """Translate connectivity failures of the store into UnavailableError"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.error(f"{func.__name__}: Store unreachable - {e}")
            raise UnavailableError("Database not available")
    return wrapper


class PersistenceGateway:
    """
    Typed data access over one session.

    Holds no business rules. Writes are flushed but never committed here,
    the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    @_surface_unavailable
    def insert(self, kind: Type[ModelT], **values) -> ModelT:
        record = kind(**values)
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        return record

    @_surface_unavailable
    def update(
        self,
        kind: Type[ModelT],
        record_id: int,
        patch: Dict[str, Any],
        expected: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Apply ``patch`` to one row and return the number of rows changed.

        ``expected`` adds column guards to the WHERE clause so the update only
        happens while the row is still in the expected state.
        """
        query = self.db.query(kind).filter(kind.id == record_id)
        for column, value in (expected or {}).items():
            query = query.filter(getattr(kind, column) == value)
        count = query.update(patch, synchronize_session="fetch")
        self.db.flush()
        return count

    @_surface_unavailable
    def find_by_id(self, kind: Type[ModelT], record_id: int) -> Optional[ModelT]:
        return self.db.query(kind).filter(kind.id == record_id).first()

    @_surface_unavailable
    def list_by_user(self, kind: Type[ModelT], user_id: int, order_by: str = "created_at") -> list[ModelT]:
        return self.db.query(kind).filter(
            kind.user_id == user_id
        ).order_by(desc(getattr(kind, order_by)), desc(kind.id)).all()

    @_surface_unavailable
    def list_by_status(self, kind: Type[ModelT], status, order_by: str = "created_at") -> list[ModelT]:
        return self.db.query(kind).filter(
            kind.status == status
        ).order_by(desc(getattr(kind, order_by)), desc(kind.id)).all()

    @_surface_unavailable
    def find_user_by_open_id(self, open_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.open_id == open_id).first()

    @_surface_unavailable
    def find_subscription(self, user_id: int) -> Optional[Subscription]:
        return self.db.query(Subscription).filter(Subscription.user_id == user_id).first()

    @_surface_unavailable
    def upsert_subscription(self, user_id: int, values: Dict[str, Any]) -> Subscription:
        """
        Update the user's subscription row in place, or insert it.

        The unique constraint on user_id arbitrates concurrent inserts: the
        losing insert rolls back to its savepoint and updates the winner's row.
        """
        count = self.db.query(Subscription).filter(
            Subscription.user_id == user_id
        ).update(values, synchronize_session="fetch")

        if count == 0:
            try:
                with self.db.begin_nested():
                    self.db.add(Subscription(user_id=user_id, **values))
            except IntegrityError:
                logger.info(f"upsert_subscription: Concurrent insert for user {user_id}, updating")
                self.db.query(Subscription).filter(
                    Subscription.user_id == user_id
                ).update(values, synchronize_session="fetch")

        self.db.flush()
        subscription = self.find_subscription(user_id)
        self.db.refresh(subscription)
        return subscription
