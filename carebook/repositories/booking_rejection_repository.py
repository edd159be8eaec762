# carebook/repositories/booking_rejection_repository.py
"""Data access for provider booking rejection requests."""

import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking_rejection import BookingRejectionRequest, RequestStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRejectionRepository(BaseRepository[BookingRejectionRequest]):
    def __init__(self, db: Session):
        super().__init__(db, BookingRejectionRequest)
        self.logger = logging.getLogger(__name__)

    def get_pending_for_booking(self, booking_id: str) -> Optional[BookingRejectionRequest]:
        return self.find_one_by(booking_id=booking_id, status=RequestStatus.PENDING.value)

    def list_by_status(self, status: RequestStatus) -> List[BookingRejectionRequest]:
        try:
            return cast(
                List[BookingRejectionRequest],
                self.db.query(BookingRejectionRequest)
                .filter(BookingRejectionRequest.status == status.value)
                .order_by(BookingRejectionRequest.requested_at)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing rejection requests: {str(e)}")
            raise RepositoryException(f"Failed to list rejection requests: {str(e)}")

    def list_for_provider(self, provider_id: str) -> List[BookingRejectionRequest]:
        try:
            return cast(
                List[BookingRejectionRequest],
                self.db.query(BookingRejectionRequest)
                .filter(BookingRejectionRequest.provider_id == provider_id)
                .order_by(BookingRejectionRequest.requested_at.desc())
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing provider rejection requests: {str(e)}")
            raise RepositoryException(f"Failed to list rejection requests: {str(e)}")
