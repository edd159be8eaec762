# carebook/models/booking_rejection.py
"""
Provider-initiated booking rejection requests.

An assigned provider who cannot deliver a booking asks an admin to release
them. Approval cancels the booking and unassigns the provider; denial leaves
the booking untouched.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
import ulid

from ..database import Base


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class BookingRejectionRequest(Base):
    __tablename__ = "booking_rejection_requests"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=False, index=True)
    provider_id = Column(String(26), ForeignKey("providers.id"), nullable=False, index=True)
    rejection_reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)

    requested_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    reviewed_by_id = Column(String(26), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING.value

    def __repr__(self) -> str:
        return f"<BookingRejectionRequest {self.id}: booking={self.booking_id} {self.status}>"
