# carebook/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the CareBook platform.

Supplies the booking rows the conflict checker needs. Only bookings that
actually occupy a provider's time (CONFIRMED or IN_PROGRESS) are returned.
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import BLOCKING_STATUSES, Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_bookings_for_conflict_check(
        self, provider_id: str, check_date: date, exclude_booking_id: Optional[str] = None
    ) -> List[Booking]:
        """
        Get bookings that could conflict with a time range on a specific date.

        Args:
            provider_id: The provider to check
            check_date: The date to check for conflicts
            exclude_booking_id: Optional booking ID to exclude from results

        Returns:
            Blocking bookings for the provider on that date, ordered by time
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.provider_id == provider_id,
                Booking.scheduled_date == check_date,
                Booking.status.in_([status.value for status in BLOCKING_STATUSES]),
            )

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return cast(List[Booking], query.order_by(Booking.scheduled_time).all())

        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")

    def get_blocking_bookings_for_providers(
        self,
        provider_ids: List[str],
        check_date: date,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Batch variant of ``get_bookings_for_conflict_check`` for many providers."""
        if not provider_ids:
            return []
        try:
            query = self.db.query(Booking).filter(
                Booking.provider_id.in_(provider_ids),
                Booking.scheduled_date == check_date,
                Booking.status.in_([status.value for status in BLOCKING_STATUSES]),
            )
            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)
            return cast(List[Booking], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting provider bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")
