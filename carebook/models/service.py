# carebook/models/service.py
"""Bookable healthcare service (e.g. home nursing visit, physiotherapy session)."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
import ulid

from ..database import Base


class Service(Base):
    """
    A service customers can book.

    ``price`` is charged per booking and ``duration_hours`` defines the length of
    the appointment window used for overlap checks.
    """

    __tablename__ = "services"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration_hours = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="check_service_price_positive"),
        CheckConstraint("duration_hours >= 1", name="check_service_duration_positive"),
    )

    def __repr__(self) -> str:
        return f"<Service {self.name}: {self.price} / {self.duration_hours}h>"
