# carebook/models/booking.py
"""
Booking model for the CareBook platform.

A booking is a customer's request for a service at a given date and time.
It moves through a fixed lifecycle:

    PENDING -> CONFIRMED -> IN_PROGRESS -> COMPLETED
       |           |             |
       +-----------+-------------+--> CANCELLED

COMPLETED and CANCELLED are terminal. Payment status is tracked separately
and never drives the lifecycle.

Service details (name, duration, price) are snapshotted at creation so the
booking keeps its meaning if the catalog changes later.
"""

from datetime import date, datetime, time, timezone
from enum import Enum
import logging
from typing import Dict, FrozenSet

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Awaiting provider/admin acceptance
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"  # Service being delivered
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIAL_REFUND = "PARTIAL_REFUND"


ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED}
)
CANCELLABLE_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)
RESCHEDULABLE_STATUSES: FrozenSet[BookingStatus] = CANCELLABLE_STATUSES

# Bookings in these statuses occupy their provider's time
BLOCKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)


def can_transition(current: str, target: str) -> bool:
    """Return True if ``current -> target`` is an edge of the lifecycle."""
    return BookingStatus(target) in ALLOWED_TRANSITIONS[BookingStatus(current)]


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(String(26), ForeignKey("providers.id"), nullable=True, index=True)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)

    # Service snapshot
    service_name = Column(String(255), nullable=False)
    duration_hours = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    special_instructions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_status IN ('PENDING', 'PAID', 'FAILED', 'REFUNDED', 'PARTIAL_REFUND')",
            name="ck_bookings_payment_status",
        ),
        CheckConstraint("duration_hours > 0", name="check_booking_duration_positive"),
        CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: user={self.user_id}, provider={self.provider_id}, "
            f"date={self.scheduled_date}, time={self.scheduled_time}, status={self.status}>"
        )

    @property
    def status_enum(self) -> BookingStatus:
        return BookingStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status_enum in TERMINAL_STATUSES

    @property
    def can_be_cancelled(self) -> bool:
        return self.status_enum in CANCELLABLE_STATUSES

    @property
    def can_be_rescheduled(self) -> bool:
        return self.status_enum in RESCHEDULABLE_STATUSES

    def can_transition_to(self, target: BookingStatus) -> bool:
        return can_transition(self.status, target)

    def append_note(self, text: str) -> None:
        """Append a line to the free-text notes."""
        self.notes = f"{self.notes}\n{text}" if self.notes else text

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    def reschedule(self, new_date: date, new_time: time) -> None:
        self.scheduled_date = new_date
        self.scheduled_time = new_time
        logger.info(f"Booking {self.id} rescheduled to {new_date} {new_time}")
