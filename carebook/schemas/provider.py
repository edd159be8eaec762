"""Provider response schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..models.provider import AvailabilityStatus


class ProviderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    qualification: Optional[str] = None
    experience_years: Optional[int] = None
    availability_status: AvailabilityStatus
    is_verified: bool
    rating: float
