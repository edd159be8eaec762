# carebook/services/conflict_checker.py
"""
Conflict Checker Service for the CareBook platform.

Decides whether a provider's existing bookings collide with a proposed
appointment window. Windows are half-open ``[start, end)``: an appointment
ending at 14:00 does not collide with one starting at 14:00.
"""

from datetime import date, datetime, time, timedelta
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models.booking import Booking
from ..models.provider import Provider
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def booking_window(
    scheduled_date: date, scheduled_time: time, duration_hours: int
) -> Tuple[datetime, datetime]:
    start = datetime.combine(scheduled_date, scheduled_time)
    return start, start + timedelta(hours=duration_hours)


class ConflictChecker(BaseService):
    """Service for checking provider booking conflicts."""

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        provider_id: str,
        check_date: date,
        start_time: time,
        duration_hours: int,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Check if an appointment window conflicts with the provider's bookings.

        Args:
            provider_id: The provider to check
            check_date: The date to check
            start_time: Start time of the proposed appointment
            duration_hours: Length of the proposed appointment
            exclude_booking_id: Optional booking ID to exclude from check

        Returns:
            List of conflicts with booking details
        """
        bookings = self.repository.get_bookings_for_conflict_check(
            provider_id, check_date, exclude_booking_id
        )
        start, end = booking_window(check_date, start_time, duration_hours)

        conflicts = []
        for booking in self._overlapping(bookings, start, end):
            conflicts.append(
                {
                    "booking_id": booking.id,
                    "scheduled_time": str(booking.scheduled_time),
                    "duration_hours": booking.duration_hours,
                    "service_name": booking.service_name,
                    "status": booking.status,
                }
            )

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for provider {provider_id} "
                f"on {check_date} between {start.time()}-{end.time()}"
            )

        return conflicts

    def has_conflict(self, provider_id: str, booking: Booking) -> bool:
        """Simplified boolean check for assigning ``provider_id`` to ``booking``."""
        return bool(
            self.check_booking_conflicts(
                provider_id,
                booking.scheduled_date,
                booking.scheduled_time,
                booking.duration_hours,
                exclude_booking_id=booking.id,
            )
        )

    @BaseService.measure_operation("filter_conflict_free_providers")
    def filter_conflict_free(self, providers: List[Provider], booking: Booking) -> List[Provider]:
        """
        Drop providers whose blocking bookings overlap ``booking``.

        Loads every candidate's bookings for the date in one query.
        """
        if not providers:
            return []
        existing = self.repository.get_blocking_bookings_for_providers(
            [provider.id for provider in providers],
            booking.scheduled_date,
            exclude_booking_id=booking.id,
        )
        by_provider: Dict[str, List[Booking]] = {}
        for other in existing:
            by_provider.setdefault(other.provider_id, []).append(other)

        start, end = booking_window(
            booking.scheduled_date, booking.scheduled_time, booking.duration_hours
        )
        return [
            provider
            for provider in providers
            if not self._overlapping(by_provider.get(provider.id, []), start, end)
        ]

    @staticmethod
    def _overlapping(
        bookings: Iterable[Booking], start: datetime, end: datetime
    ) -> List[Booking]:
        overlapping = []
        for booking in bookings:
            other_start, other_end = booking_window(
                booking.scheduled_date, booking.scheduled_time, booking.duration_hours
            )
            if intervals_overlap(start, end, other_start, other_end):
                overlapping.append(booking)
        return overlapping
