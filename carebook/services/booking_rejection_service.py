# carebook/services/booking_rejection_service.py
"""
Booking Rejection Service for the CareBook platform.

An assigned provider asks to be released from a booking; an admin approves
or denies the request. Approval cancels the booking and unassigns the
provider, denial leaves the booking as it was.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    ForbiddenException,
    InvalidArgumentException,
    InvalidOperationException,
    NotFoundException,
)
from ..models.booking import BookingStatus
from ..models.booking_rejection import BookingRejectionRequest, RequestStatus
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService
from .booking_service import BookingService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PROVIDER_REJECTED_NOTE_PREFIX = "Provider rejected - Reason: "


class BookingRejectionService(BaseService):
    def __init__(
        self,
        db: Session,
        booking_service: Optional[BookingService] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db)
        self.notification_service = notification_service or NotificationService(db)
        self.booking_service = booking_service or BookingService(
            db, notification_service=self.notification_service
        )
        self.repository = RepositoryFactory.create_booking_rejection_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("request_rejection")
    def request_rejection(
        self, actor: Actor, booking_id: str, reason: str
    ) -> BookingRejectionRequest:
        """
        File a provider's request to be released from a booking.

        Raises:
            NotFoundException: If the booking does not exist
            ForbiddenException: If the actor is not the booking's assigned provider
            InvalidArgumentException: If no reason is given
            InvalidOperationException: If the booking is finished or a request is already pending
        """
        with self.transaction():
            booking = self.booking_repository.get_by_id(booking_id)
            if not booking:
                raise NotFoundException(f"Booking not found with id: {booking_id}")
            if not actor.is_assigned_to(booking.provider_id):
                raise ForbiddenException("You can only reject bookings assigned to you")
            if not reason or not reason.strip():
                raise InvalidArgumentException("Rejection reason is required")
            if booking.is_terminal:
                raise InvalidOperationException(
                    f"Cannot reject a {booking.status} booking",
                    details={"booking_id": booking.id, "status": booking.status},
                )
            if self.repository.get_pending_for_booking(booking.id):
                raise InvalidOperationException(
                    "A rejection request is already pending for this booking",
                    details={"booking_id": booking.id},
                )

            request = self.repository.create(
                booking_id=booking.id,
                provider_id=actor.provider_id,
                rejection_reason=reason.strip(),
                status=RequestStatus.PENDING.value,
            )

        self.log_operation("request_rejection", booking_id=booking.id, request_id=request.id)
        return request

    @BaseService.measure_operation("approve_rejection")
    def approve_rejection(
        self, actor: Actor, request_id: str, admin_notes: Optional[str] = None
    ) -> BookingRejectionRequest:
        """Approve a pending request: cancel the booking and unassign the provider."""
        self._ensure_admin(actor)

        with self.transaction():
            request = self._get_pending_request(request_id)
            booking = self.booking_repository.get_by_id(request.booking_id)
            if not booking:
                raise NotFoundException(f"Booking not found with id: {request.booking_id}")
            if booking.is_terminal:
                raise InvalidOperationException(
                    f"Booking is already {booking.status}",
                    details={"booking_id": booking.id, "status": booking.status},
                )

            self._mark_reviewed(request, actor, RequestStatus.APPROVED, admin_notes)
            previous = self.booking_service.transition(booking, BookingStatus.CANCELLED)
            booking.provider_id = None
            booking.append_note(PROVIDER_REJECTED_NOTE_PREFIX + request.rejection_reason)
            self.booking_repository.flush()

        self.notification_service.notify_status_changed(booking, previous)
        self.notification_service.notify_rejection_reviewed(request)
        return request

    @BaseService.measure_operation("deny_rejection")
    def deny_rejection(
        self, actor: Actor, request_id: str, admin_notes: Optional[str] = None
    ) -> BookingRejectionRequest:
        """Deny a pending request; the booking and its assignment are untouched."""
        self._ensure_admin(actor)

        with self.transaction():
            request = self._get_pending_request(request_id)
            self._mark_reviewed(request, actor, RequestStatus.REJECTED, admin_notes)
            self.repository.flush()

        self.notification_service.notify_rejection_reviewed(request)
        return request

    def list_pending_requests(self, actor: Actor) -> List[BookingRejectionRequest]:
        self._ensure_admin(actor)
        return self.repository.list_by_status(RequestStatus.PENDING)

    def list_requests_for_provider(
        self, actor: Actor, provider_id: str
    ) -> List[BookingRejectionRequest]:
        if not (actor.is_admin or (actor.is_provider and actor.provider_id == provider_id)):
            raise ForbiddenException("You can only view your own rejection requests")
        return self.repository.list_for_provider(provider_id)

    def _get_pending_request(self, request_id: str) -> BookingRejectionRequest:
        request = self.repository.get_by_id(request_id)
        if not request:
            raise NotFoundException(f"Rejection request not found with id: {request_id}")
        if not request.is_pending:
            raise InvalidOperationException(
                f"Rejection request has already been {request.status.lower()}",
                details={"request_id": request.id, "status": request.status},
            )
        return request

    @staticmethod
    def _mark_reviewed(
        request: BookingRejectionRequest,
        actor: Actor,
        status: RequestStatus,
        admin_notes: Optional[str],
    ) -> None:
        request.status = status.value
        request.reviewed_by_id = actor.user_id
        request.reviewed_at = datetime.now(timezone.utc)
        request.admin_notes = admin_notes

    @staticmethod
    def _ensure_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise ForbiddenException("Admin access required")
