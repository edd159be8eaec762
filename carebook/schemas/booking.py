# carebook/schemas/booking.py
"""
Booking request and response schemas.

Request models forbid unknown fields. Response models read straight from
ORM objects.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH, MAX_REASON_LENGTH
from ..models.booking import BookingStatus, PaymentStatus
from ._strict_base import StrictRequestModel


def _parse_time(v: object) -> object:
    """Accept HH:MM strings alongside regular time values."""
    if isinstance(v, str) and v.count(":") == 1:
        try:
            hour, minute = v.split(":")
            return time(int(hour), int(minute))
        except ValueError:
            raise ValueError(f"Invalid time format: {v}. Expected HH:MM format.")
    return v


class BookingCreate(StrictRequestModel):
    """Create a booking for a service at a given date and time."""

    service_id: str = Field(..., description="Service being booked")
    scheduled_date: date = Field(..., description="Date of the appointment")
    scheduled_time: time = Field(..., description="Start time (HH:MM)")
    special_instructions: Optional[str] = Field(
        None, max_length=MAX_NOTES_LENGTH, description="Optional note from the customer"
    )
    user_id: Optional[str] = Field(
        None, description="Customer to book for (admins only; defaults to the caller)"
    )

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return _parse_time(v)


class BookingReject(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class BookingComplete(StrictRequestModel):
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class BookingReschedule(StrictRequestModel):
    """Move a booking to a new date and time."""

    scheduled_date: date = Field(..., description="New date for the appointment")
    scheduled_time: time = Field(..., description="New start time (HH:MM)")

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return _parse_time(v)


class ProviderAssign(StrictRequestModel):
    provider_id: str = Field(..., description="Provider to assign")


class PaymentStatusUpdate(StrictRequestModel):
    payment_status: PaymentStatus


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    provider_id: Optional[str] = None
    service_id: str
    service_name: str
    duration_hours: int
    scheduled_date: date
    scheduled_time: time
    status: BookingStatus
    payment_status: PaymentStatus
    total_amount: Decimal
    special_instructions: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class RefundResponse(BaseModel):
    booking_id: str
    refund_amount: Decimal
    refund_percent: int
    hours_before_start: float
    policy_basis: str


class BookingStatsResponse(BaseModel):
    total_bookings: int
    active_bookings: int
    by_status: Dict[str, int]
    completed_revenue: Decimal
