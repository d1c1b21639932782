from sqlalchemy import Column, Integer, String, DateTime, Enum, Text
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    open_id = Column(String(64), unique=True, index=True, nullable=False)  # External auth identifier (Firebase UID)
    name = Column(Text, nullable=True)
    email = Column(String(320), nullable=True, index=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_signed_in = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    # Relationships
    subscription = relationship("Subscription", back_populates="user", uselist=False)
    payment_requests = relationship("PaymentRequest", back_populates="user")
    content_posts = relationship("ContentPost", back_populates="user")
    content_templates = relationship("ContentTemplate", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
