"""FastAPI dependencies shared by the route modules."""

from .auth import get_current_actor
from .database import get_db
from .services import (
    get_booking_rejection_service,
    get_booking_service,
    get_notification_service,
)

__all__ = [
    "get_booking_rejection_service",
    "get_booking_service",
    "get_current_actor",
    "get_db",
    "get_notification_service",
]
