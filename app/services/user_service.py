import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError, UnavailableError
from app.core.gateway import PersistenceGateway
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserResponse(BaseModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def sync_login(
        self,
        db: Session,
        open_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None
    ) -> User:
        """
        Resolve the local user for an external identity.

        First login creates the user, the configured owner gets the admin
        role. Later logins refresh profile fields and the sign-in timestamp
        on a best-effort basis.
        """
        self.logger.info(f"sync_login: Entry - open_id: {open_id}")
        gateway = PersistenceGateway(db)

        try:
            user = self.find_by_open_id(db, open_id)
            if not user:
                role = UserRole.ADMIN if settings.owner_uid and open_id == settings.owner_uid else UserRole.USER
                user = gateway.insert(
                    User,
                    open_id=open_id,
                    name=name,
                    email=email,
                    role=role,
                    last_signed_in=datetime.utcnow()
                )
                db.commit()
                db.refresh(user)
                self.logger.info(f"sync_login: Created user {user.id}, role: {role.value}")
                return user
        except Exception as e:
            db.rollback()
            self.logger.error(f"sync_login: Failure - {e}")
            raise

        patch = {'last_signed_in': datetime.utcnow()}
        if name is not None:
            patch['name'] = name
        if email is not None:
            patch['email'] = email

        user_id = user.id
        try:
            gateway.update(User, user_id, patch)
            db.commit()
        except (UnavailableError, SQLAlchemyError) as e:
            # Bookkeeping must not block authentication. Detach the loaded row
            # so the rollback does not expire it into a reload.
            db.expunge(user)
            db.rollback()
            self.logger.warning(f"sync_login: Could not record sign-in for user {user_id} - {e}")

        self.logger.info(f"sync_login: Success - user: {user_id}")
        return user

    def find_by_open_id(self, db: Session, open_id: str) -> Optional[User]:
        return PersistenceGateway(db).find_user_by_open_id(open_id)

    def get_user(self, db: Session, user_id: Optional[int] = None, email: Optional[str] = None) -> User:
        """Look a user up by numeric id or email"""
        if user_id is not None:
            user = PersistenceGateway(db).find_by_id(User, user_id)
        else:
            user = db.query(User).filter(User.email == email).first()

        if not user:
            raise NotFoundError(f"User not found: {user_id if user_id is not None else email}")
        return user

    def set_role(self, db: Session, user: User, role: UserRole) -> User:
        self.logger.info(f"set_role: Entry - user: {user.id}, role: {role.value}")

        try:
            PersistenceGateway(db).update(User, user.id, {'role': role})
            db.commit()
            db.refresh(user)
            self.logger.info(f"set_role: Success - user: {user.id}")
            return user
        except Exception as e:
            db.rollback()
            self.logger.error(f"set_role: Failure - {e}")
            raise
