# carebook/repositories/booking_repository.py
"""
Booking Repository for the CareBook platform.

Query side of the booking lifecycle: listings, filters and the aggregates
behind the admin dashboard.
"""

from decimal import Decimal
import logging
from typing import Dict, List, Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import TERMINAL_STATUSES, Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def list_bookings(
        self,
        *,
        user_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Booking]:
        """
        List bookings, newest appointment first.

        All filters are optional and combine with AND.
        """
        try:
            query = self.db.query(Booking)
            if user_id:
                query = query.filter(Booking.user_id == user_id)
            if provider_id:
                query = query.filter(Booking.provider_id == provider_id)
            if status:
                query = query.filter(Booking.status == status)
            query = query.order_by(
                Booking.scheduled_date.desc(), Booking.scheduled_time.desc(), Booking.id
            )
            return cast(List[Booking], query.offset(skip).limit(limit).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_unassigned(self) -> List[Booking]:
        """Non-terminal bookings still waiting for a provider, oldest first."""
        try:
            return cast(
                List[Booking],
                self.db.query(Booking)
                .filter(
                    Booking.provider_id.is_(None),
                    Booking.status.notin_([status.value for status in TERMINAL_STATUSES]),
                )
                .order_by(Booking.scheduled_date, Booking.scheduled_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing unassigned bookings: {str(e)}")
            raise RepositoryException(f"Failed to list unassigned bookings: {str(e)}")

    def provider_has_other_in_progress(self, provider_id: str, exclude_booking_id: str) -> bool:
        """True if the provider is delivering any booking besides the given one."""
        try:
            return (
                self.db.query(Booking.id)
                .filter(
                    Booking.provider_id == provider_id,
                    Booking.status == BookingStatus.IN_PROGRESS.value,
                    Booking.id != exclude_booking_id,
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking provider workload: {str(e)}")
            raise RepositoryException(f"Failed to check provider workload: {str(e)}")

    def count_by_status(self) -> Dict[str, int]:
        """Booking counts keyed by status; statuses with no bookings report 0."""
        try:
            rows = self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status)
            counts = {status.value: 0 for status in BookingStatus}
            for status, count in rows.all():
                counts[status] = count
            return counts
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings by status: {str(e)}")
            raise RepositoryException(f"Failed to count bookings: {str(e)}")

    def completed_revenue(self) -> Decimal:
        """Sum of ``total_amount`` over completed bookings."""
        try:
            total = (
                self.db.query(func.coalesce(func.sum(Booking.total_amount), 0))
                .filter(Booking.status == BookingStatus.COMPLETED.value)
                .scalar()
            )
            return Decimal(str(total)).quantize(Decimal("0.01"))
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing completed revenue: {str(e)}")
            raise RepositoryException(f"Failed to compute revenue: {str(e)}")
