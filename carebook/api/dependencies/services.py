# carebook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_rejection_service import BookingRejectionService
from ...services.booking_service import BookingService
from ...services.email_console import ConsoleEmailService
from ...services.notification_service import NotificationService
from .database import get_db


def get_email_service() -> ConsoleEmailService:
    return ConsoleEmailService()


def get_notification_service(
    db: Session = Depends(get_db),
    email_service: ConsoleEmailService = Depends(get_email_service),
) -> NotificationService:
    """
    Get notification service instance.

    Args:
        db: Database session
        email_service: Email service for sending emails

    Returns:
        NotificationService instance
    """
    return NotificationService(db, email_service=email_service)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingService:
    """Get booking service instance with all dependencies."""
    return BookingService(db, notification_service=notification_service)


def get_booking_rejection_service(
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingRejectionService:
    return BookingRejectionService(
        db, booking_service=booking_service, notification_service=notification_service
    )
