# carebook/models/provider.py
"""
Provider model for the CareBook platform.

A provider is a verified healthcare professional who can be assigned to
bookings for the services they offer.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class AvailabilityStatus(str, Enum):
    """Whether a provider can take on work right now."""

    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"  # Currently delivering a service
    OFF_DUTY = "OFF_DUTY"
    ON_LEAVE = "ON_LEAVE"


provider_services = Table(
    "provider_services",
    Base.metadata,
    Column("provider_id", String(26), ForeignKey("providers.id"), primary_key=True),
    Column("service_id", String(26), ForeignKey("services.id"), primary_key=True),
)


class Provider(Base):
    __tablename__ = "providers"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=True, unique=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)
    qualification = Column(String(255), nullable=True)
    experience_years = Column(Integer, nullable=True)
    availability_status = Column(
        String(20), nullable=False, default=AvailabilityStatus.AVAILABLE.value
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    rating = Column(Float, nullable=False, default=0.0)
    total_ratings = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    services = relationship("Service", secondary=provider_services, lazy="selectin")

    def __repr__(self) -> str:
        return f"<Provider {self.name} ({self.availability_status})>"
