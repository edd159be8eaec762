# carebook/models/user.py
"""
User model for the CareBook platform.

Customers, providers and admins are all users, differentiated by ``role``.
A provider's bookable profile lives in :class:`~carebook.models.provider.Provider`.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String
import ulid

from ..core.enums import UserRole
from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
