"""
Database models for the CareBook platform.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking import Booking, BookingStatus, PaymentStatus
from .booking_rejection import BookingRejectionRequest, RequestStatus
from .provider import AvailabilityStatus, Provider, provider_services
from .service import Service
from .user import User

__all__ = [
    "AvailabilityStatus",
    "Booking",
    "BookingRejectionRequest",
    "BookingStatus",
    "PaymentStatus",
    "Provider",
    "RequestStatus",
    "Service",
    "User",
    "provider_services",
]
