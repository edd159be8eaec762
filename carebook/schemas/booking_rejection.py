"""Schemas for provider booking rejection requests."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH, MAX_REASON_LENGTH
from ..models.booking_rejection import RequestStatus
from ._strict_base import StrictRequestModel


class RejectionRequestCreate(StrictRequestModel):
    booking_id: str
    reason: str = Field(..., min_length=1, max_length=MAX_REASON_LENGTH)

    @field_validator("reason")
    @classmethod
    def clean_reason(cls, v: str) -> str:
        """Ensure reason is not empty."""
        v = v.strip()
        if not v:
            raise ValueError("Rejection reason cannot be empty")
        return v


class RejectionReview(StrictRequestModel):
    admin_notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class RejectionRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str
    provider_id: str
    rejection_reason: str
    status: RequestStatus
    requested_at: Optional[datetime] = None
    reviewed_by_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
