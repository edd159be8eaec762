# carebook/services/booking_service.py
"""
Booking Service for the CareBook platform.

Owns the booking lifecycle: creation, the status state machine, provider
assignment, refund calculation and provider availability lookups.

Every operation takes the calling ``Actor`` explicitly and runs in a single
transaction. Notifications are sent after the transaction commits and their
failures never reach the caller.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BookingConflictException,
    ForbiddenException,
    InvalidArgumentException,
    InvalidOperationException,
    InvalidTransitionException,
    NotFoundException,
)
from ..core.timezone_utils import (
    get_platform_timezone,
    get_platform_now,
    get_platform_today,
    localize_schedule,
)
from ..models.booking import TERMINAL_STATUSES, Booking, BookingStatus, PaymentStatus
from ..models.provider import AvailabilityStatus, Provider
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..schemas.booking import BookingCreate
from .base import BaseService
from .conflict_checker import ConflictChecker
from .notification_service import NotificationService
from .refund_policy_engine import RefundPolicyEngine, RefundPolicyResult

logger = logging.getLogger(__name__)

REJECTION_NOTE_PREFIX = "Rejection reason: "
COMPLETION_NOTE_PREFIX = "Completion notes: "


class BookingService(BaseService):
    """Service layer for booking lifecycle operations."""

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        repository: Optional[BookingRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        refund_policy: Optional[RefundPolicyEngine] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            notification_service: Optional notification service instance
            repository: Optional BookingRepository instance
            conflict_checker: Optional ConflictChecker instance
            refund_policy: Optional RefundPolicyEngine instance
        """
        super().__init__(db)
        self.notification_service = notification_service or NotificationService(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.provider_repository = RepositoryFactory.create_provider_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.refund_policy = refund_policy or RefundPolicyEngine()

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(self, actor: Actor, data: BookingCreate) -> Booking:
        """
        Create a PENDING booking for a service.

        Customers book for themselves; admins may book on behalf of any user.

        Raises:
            ForbiddenException: If the actor may not book for the given user
            NotFoundException: If the user or service does not exist
            InvalidOperationException: If the service is inactive
            InvalidArgumentException: If the date is in the past
        """
        user_id = data.user_id or actor.user_id
        if not actor.is_admin and (not actor.is_customer or user_id != actor.user_id):
            raise ForbiddenException("You can only create bookings for yourself")

        with self.transaction():
            user = self.user_repository.get_by_id(user_id)
            if not user:
                raise NotFoundException(f"User not found with id: {user_id}")

            service = self.service_repository.get_by_id(data.service_id)
            if not service:
                raise NotFoundException(f"Service not found with id: {data.service_id}")
            if not service.is_active:
                raise InvalidOperationException(
                    f"Service {service.name} is not currently offered",
                    details={"service_id": service.id},
                )

            self._ensure_not_past(data.scheduled_date)

            booking = self.repository.create(
                user_id=user.id,
                service_id=service.id,
                service_name=service.name,
                duration_hours=service.duration_hours,
                total_amount=service.price,
                scheduled_date=data.scheduled_date,
                scheduled_time=data.scheduled_time,
                special_instructions=data.special_instructions,
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
            )

        self.log_operation("create_booking", booking_id=booking.id, user_id=user.id)
        self.notification_service.notify_booking_created(booking)
        return booking

    # Status transitions

    @BaseService.measure_operation("accept_booking")
    def accept_booking(self, actor: Actor, booking_id: str) -> Booking:
        """PENDING -> CONFIRMED."""
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_provider_or_admin(actor, booking)
            previous = self._move(booking, BookingStatus.PENDING, BookingStatus.CONFIRMED)

        self.notification_service.notify_status_changed(booking, previous)
        return booking

    @BaseService.measure_operation("reject_booking")
    def reject_booking(
        self, actor: Actor, booking_id: str, reason: Optional[str] = None
    ) -> Booking:
        """PENDING -> CANCELLED, recording the reason in the notes when one is given."""
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_provider_or_admin(actor, booking)
            previous = self._move(booking, BookingStatus.PENDING, BookingStatus.CANCELLED)
            if reason and reason.strip():
                booking.append_note(REJECTION_NOTE_PREFIX + reason.strip())

        self.notification_service.notify_status_changed(booking, previous)
        return booking

    @BaseService.measure_operation("start_service")
    def start_service(self, actor: Actor, booking_id: str) -> Booking:
        """CONFIRMED -> IN_PROGRESS."""
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_provider_or_admin(actor, booking)
            previous = self._move(booking, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS)

        self.notification_service.notify_status_changed(booking, previous)
        return booking

    @BaseService.measure_operation("complete_service")
    def complete_service(
        self, actor: Actor, booking_id: str, notes: Optional[str] = None
    ) -> Booking:
        """IN_PROGRESS -> COMPLETED, appending completion notes when provided."""
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_provider_or_admin(actor, booking)
            previous = self._move(booking, BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED)
            if notes and notes.strip():
                booking.append_note(COMPLETION_NOTE_PREFIX + notes.strip())

        self.notification_service.notify_status_changed(booking, previous)
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, actor: Actor, booking_id: str) -> Booking:
        """
        Cancel a booking from any non-terminal status.

        Raises:
            NotFoundException: If booking not found
            ForbiddenException: If the actor neither owns the booking nor is an admin
            InvalidOperationException: If the booking is already COMPLETED or CANCELLED
        """
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_customer_or_admin(actor, booking)
            if not booking.can_be_cancelled:
                raise InvalidOperationException(
                    f"Booking cannot be cancelled - current status: {booking.status}",
                    details={"booking_id": booking.id, "status": booking.status},
                )
            previous = self.transition(booking, BookingStatus.CANCELLED)

        self.notification_service.notify_status_changed(booking, previous)
        return booking

    def delete_booking(self, actor: Actor, booking_id: str) -> Booking:
        """Bookings are never removed; deleting one cancels it."""
        return self.cancel_booking(actor, booking_id)

    @BaseService.measure_operation("reschedule_booking")
    def reschedule_booking(
        self, actor: Actor, booking_id: str, new_date: date, new_time: time
    ) -> Booking:
        """
        Move a booking to a new date and time.

        Raises:
            NotFoundException: If booking not found
            ForbiddenException: If the actor neither owns the booking nor is an admin
            InvalidArgumentException: If ``new_date`` is before today
            InvalidOperationException: If the booking's status does not allow rescheduling
            BookingConflictException: If the assigned provider is busy at the new time
        """
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            self._ensure_customer_or_admin(actor, booking)
            self._ensure_not_past(new_date)
            if not booking.can_be_rescheduled:
                raise InvalidOperationException(
                    f"Booking cannot be rescheduled - current status: {booking.status}",
                    details={"booking_id": booking.id, "status": booking.status},
                )

            if booking.provider_id and self.conflict_checker.check_booking_conflicts(
                booking.provider_id,
                new_date,
                new_time,
                booking.duration_hours,
                exclude_booking_id=booking.id,
            ):
                raise BookingConflictException(
                    "The assigned provider already has a booking at the new time",
                    details={"provider_id": booking.provider_id},
                )

            previous_date, previous_time = booking.scheduled_date, booking.scheduled_time
            booking.reschedule(new_date, new_time)
            booking.touch()
            self.repository.flush()

        self.notification_service.notify_booking_rescheduled(booking, previous_date, previous_time)
        return booking

    # Provider assignment

    @BaseService.measure_operation("assign_provider")
    def assign_provider(self, actor: Actor, booking_id: str, provider_id: str) -> Booking:
        """
        Assign a provider to a booking without changing its status.

        Reassigning an IN_PROGRESS booking hands the visit over: the new
        provider becomes BUSY and the previous one is released.

        Raises:
            ForbiddenException: If the actor is not an admin
            NotFoundException: If the booking or provider does not exist
            InvalidOperationException: If the booking is terminal or the provider unavailable
            BookingConflictException: If the provider is already booked at that time
        """
        self._ensure_admin(actor)

        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            provider = self.provider_repository.get_by_id(provider_id, load_relationships=False)
            if not provider:
                raise NotFoundException(f"Provider not found with id: {provider_id}")

            if booking.is_terminal:
                raise InvalidOperationException(
                    f"Cannot assign a provider to a {booking.status} booking",
                    details={"booking_id": booking.id, "status": booking.status},
                )
            if provider.availability_status != AvailabilityStatus.AVAILABLE.value:
                raise InvalidOperationException(
                    f"Provider is not available: {provider.availability_status}",
                    details={
                        "provider_id": provider.id,
                        "availability_status": provider.availability_status,
                    },
                )
            if self.conflict_checker.has_conflict(provider.id, booking):
                raise BookingConflictException(
                    "Provider has a conflicting booking at this time",
                    details={"provider_id": provider.id, "booking_id": booking.id},
                )

            previous_provider_id = booking.provider_id
            booking.provider_id = provider.id
            if booking.status == BookingStatus.IN_PROGRESS.value:
                # Hand the running visit over to the new provider
                provider.availability_status = AvailabilityStatus.BUSY.value
                if previous_provider_id:
                    self._release_provider(previous_provider_id, booking.id)
            booking.touch()
            self.repository.flush()

        self.log_operation("assign_provider", booking_id=booking.id, provider_id=provider.id)
        self.notification_service.notify_provider_assigned(booking, provider)
        return booking

    @BaseService.measure_operation("find_available_providers")
    def find_available_providers_for_booking(
        self, actor: Actor, booking_id: str
    ) -> List[Provider]:
        """
        Providers who could be assigned to a booking.

        A provider qualifies when they offer the booked service, are verified and
        AVAILABLE, and none of their CONFIRMED or IN_PROGRESS bookings on the same
        date overlaps this booking's window.
        """
        self._ensure_admin(actor)
        booking = self._get_booking_or_404(booking_id)
        candidates = self.provider_repository.find_candidates_for_service(booking.service_id)
        available = self.conflict_checker.filter_conflict_free(candidates, booking)
        self.logger.debug(
            f"{len(available)} of {len(candidates)} providers available for booking {booking.id}"
        )
        return available

    # Payment and refunds

    @BaseService.measure_operation("update_payment_status")
    def update_payment_status(
        self, actor: Actor, booking_id: str, payment_status: PaymentStatus
    ) -> Booking:
        self._ensure_admin(actor)
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            booking.payment_status = PaymentStatus(payment_status).value
            booking.touch()
            self.repository.flush()
        return booking

    def evaluate_refund(
        self, actor: Actor, booking_id: str, now: Optional[datetime] = None
    ) -> RefundPolicyResult:
        """
        Full refund policy outcome; reads only, never changes the booking.

        A cancelled booking is measured from the moment it was cancelled, so its
        refund does not shrink as time passes. Other bookings are measured from
        ``now``, previewing what cancelling at that moment would return.
        """
        booking = self._get_booking_or_404(booking_id)
        self._ensure_customer_or_admin(actor, booking)

        if booking.status == BookingStatus.CANCELLED.value and booking.cancelled_at:
            now = booking.cancelled_at
            if now.tzinfo is None:
                # SQLite hands back naive values; they were stored as UTC
                now = now.replace(tzinfo=timezone.utc)
        else:
            now = now or get_platform_now()
            if now.tzinfo is None:
                now = get_platform_timezone().localize(now)

        return self.refund_policy.evaluate(
            total_amount=booking.total_amount,
            scheduled_start=localize_schedule(booking.scheduled_date, booking.scheduled_time),
            now=now,
            payment_status=booking.payment_status,
            status=booking.status,
        )

    @BaseService.measure_operation("calculate_refund_amount")
    def calculate_refund_amount(
        self, actor: Actor, booking_id: str, now: Optional[datetime] = None
    ) -> Decimal:
        """Refundable amount in ``[0, total_amount]``."""
        return self.evaluate_refund(actor, booking_id, now).refund_amount

    # Queries

    @BaseService.measure_operation("get_booking")
    def get_booking(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        if not (
            actor.is_admin
            or actor.owns_booking(booking.user_id)
            or actor.is_assigned_to(booking.provider_id)
        ):
            raise ForbiddenException("You don't have permission to view this booking")
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        actor: Actor,
        *,
        user_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Booking]:
        """
        List bookings visible to the actor.

        Customers only ever see their own bookings and providers only the ones
        assigned to them, whatever filters they pass.
        """
        if actor.is_customer:
            user_id = actor.user_id
        elif actor.is_provider:
            provider_id = actor.provider_id
        elif not actor.is_admin:
            raise ForbiddenException("You don't have permission to list bookings")

        return self.repository.list_bookings(
            user_id=user_id,
            provider_id=provider_id,
            status=BookingStatus(status).value if status else None,
            skip=skip,
            limit=limit,
        )

    @BaseService.measure_operation("list_unassigned_bookings")
    def list_unassigned_bookings(self, actor: Actor) -> List[Booking]:
        self._ensure_admin(actor)
        return self.repository.list_unassigned()

    @BaseService.measure_operation("get_booking_stats")
    def get_booking_stats(self, actor: Actor) -> Dict[str, Any]:
        """Dashboard counters: totals, per-status counts and completed revenue."""
        self._ensure_admin(actor)
        by_status = self.repository.count_by_status()
        terminal = {status.value for status in TERMINAL_STATUSES}
        return {
            "total_bookings": sum(by_status.values()),
            "active_bookings": sum(
                count for status, count in by_status.items() if status not in terminal
            ),
            "by_status": by_status,
            "completed_revenue": self.repository.completed_revenue(),
        }

    # Lifecycle internals

    def transition(self, booking: Booking, target: BookingStatus) -> str:
        """
        Apply ``target`` to a booking inside the caller's transaction.

        Enforces the lifecycle edges, stamps ``updated_at`` and the matching
        ``cancelled_at``/``completed_at`` and keeps the provider's availability in
        step with their workload. Returns the previous status.
        """
        previous = booking.status
        if not booking.can_transition_to(target):
            raise InvalidTransitionException(previous, target.value)

        now = datetime.now(timezone.utc)
        booking.status = target.value
        booking.updated_at = now
        if target == BookingStatus.CANCELLED:
            booking.cancelled_at = now
        elif target == BookingStatus.COMPLETED:
            booking.completed_at = now

        self._sync_provider_availability(booking)
        self.repository.flush()

        prometheus_metrics.record_booking_transition(previous, target.value)
        self.logger.info(f"Booking {booking.id} moved from {previous} to {target.value}")
        return previous

    def _move(self, booking: Booking, expected: BookingStatus, target: BookingStatus) -> str:
        """Transition that is only legal from exactly one status."""
        if booking.status != expected.value:
            raise InvalidTransitionException(booking.status, target.value)
        return self.transition(booking, target)

    def _sync_provider_availability(self, booking: Booking) -> None:
        if not booking.provider_id:
            return
        provider = self.provider_repository.get_by_id(booking.provider_id, load_relationships=False)
        if not provider:
            return

        if booking.status == BookingStatus.IN_PROGRESS.value:
            provider.availability_status = AvailabilityStatus.BUSY.value
        elif booking.status in (BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value):
            self._release_provider(provider.id, booking.id)

    def _release_provider(self, provider_id: str, booking_id: str) -> None:
        """Return a BUSY provider to AVAILABLE unless another visit keeps them busy."""
        provider = self.provider_repository.get_by_id(provider_id, load_relationships=False)
        if (
            provider
            and provider.availability_status == AvailabilityStatus.BUSY.value
            and not self.repository.provider_has_other_in_progress(provider.id, booking_id)
        ):
            provider.availability_status = AvailabilityStatus.AVAILABLE.value

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException(f"Booking not found with id: {booking_id}")
        return booking

    @staticmethod
    def _ensure_not_past(scheduled_date: date) -> None:
        today = get_platform_today()
        if scheduled_date < today:
            raise InvalidArgumentException(
                "Scheduled date cannot be in the past",
                details={"scheduled_date": scheduled_date.isoformat(), "today": today.isoformat()},
            )

    @staticmethod
    def _ensure_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise ForbiddenException("Admin access required")

    @staticmethod
    def _ensure_customer_or_admin(actor: Actor, booking: Booking) -> None:
        if not (actor.is_admin or actor.owns_booking(booking.user_id)):
            raise ForbiddenException("You don't have permission to modify this booking")

    @staticmethod
    def _ensure_provider_or_admin(actor: Actor, booking: Booking) -> None:
        if not (actor.is_admin or actor.is_assigned_to(booking.provider_id)):
            raise ForbiddenException("Only the assigned provider or an admin can do this")
