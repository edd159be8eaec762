# carebook/repositories/provider_repository.py
"""Provider Repository for the CareBook platform."""

import logging
from typing import List, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.provider import AvailabilityStatus, Provider, provider_services
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProviderRepository(BaseRepository[Provider]):
    def __init__(self, db: Session):
        super().__init__(db, Provider)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Provider.services))

    def find_candidates_for_service(self, service_id: str) -> List[Provider]:
        """
        Providers who could take a booking for ``service_id``.

        Candidates offer the service, are verified and currently AVAILABLE.
        Time conflicts are checked separately by the conflict checker.
        """
        try:
            return cast(
                List[Provider],
                self.db.query(Provider)
                .join(provider_services, provider_services.c.provider_id == Provider.id)
                .filter(
                    provider_services.c.service_id == service_id,
                    Provider.is_verified.is_(True),
                    Provider.availability_status == AvailabilityStatus.AVAILABLE.value,
                )
                .order_by(Provider.rating.desc(), Provider.name)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding providers for service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to find providers: {str(e)}")
