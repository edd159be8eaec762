# carebook/services/notification_service.py
"""
Notification Service for the CareBook platform.

Renders booking notifications with Jinja2 and hands them to the configured
email sender. Dispatch is fire-and-forget: every public method returns a
bool and logs failures instead of raising, so a broken mailbox never undoes
a booking change that has already been committed.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from jinja2 import Environment, StrictUndefined
from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.booking import Booking
from ..models.booking_rejection import BookingRejectionRequest
from ..models.provider import Provider
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from .base import BaseService
from .email_console import ConsoleEmailService
from .notification_templates import (
    BOOKING_CREATED,
    BOOKING_RESCHEDULED,
    BOOKING_STATUS_CHANGED,
    PROVIDER_ASSIGNED,
    REJECTION_REVIEWED,
    NotificationTemplate,
)

logger = logging.getLogger(__name__)

# (email, display name)
Recipient = Tuple[str, str]


class NotificationService(BaseService):
    """Central notification service for booking lifecycle events."""

    def __init__(self, db: Session, email_service: Optional[Any] = None):
        super().__init__(db)
        self.email_service = email_service or ConsoleEmailService()
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.provider_repository = RepositoryFactory.create_provider_repository(db)
        self.env = Environment(
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    @BaseService.measure_operation("notify_booking_created")
    def notify_booking_created(self, booking: Booking) -> bool:
        return self._dispatch(
            BOOKING_CREATED, lambda: self._customer(booking), {"booking": booking}
        )

    @BaseService.measure_operation("notify_status_changed")
    def notify_status_changed(self, booking: Booking, previous_status: str) -> bool:
        return self._dispatch(
            BOOKING_STATUS_CHANGED,
            lambda: self._booking_parties(booking),
            {"booking": booking, "previous_status": previous_status},
        )

    @BaseService.measure_operation("notify_booking_rescheduled")
    def notify_booking_rescheduled(
        self, booking: Booking, previous_date: Any, previous_time: Any
    ) -> bool:
        return self._dispatch(
            BOOKING_RESCHEDULED,
            lambda: self._booking_parties(booking),
            {"booking": booking, "previous_date": previous_date, "previous_time": previous_time},
        )

    @BaseService.measure_operation("notify_provider_assigned")
    def notify_provider_assigned(self, booking: Booking, provider: Provider) -> bool:
        return self._dispatch(
            PROVIDER_ASSIGNED, lambda: [(provider.email, provider.name)], {"booking": booking}
        )

    @BaseService.measure_operation("notify_rejection_reviewed")
    def notify_rejection_reviewed(self, request: BookingRejectionRequest) -> bool:
        return self._dispatch(
            REJECTION_REVIEWED,
            lambda: self._provider_by_id(request.provider_id),
            {"request": request},
        )

    def render(self, template: NotificationTemplate, context: Dict[str, Any]) -> Tuple[str, str]:
        """Render ``(subject, html_body)`` for a template."""
        full_context = {"brand_name": settings.brand_name, **context}
        subject = self.env.from_string(template.subject_template).render(**full_context)
        body = self.env.from_string(template.body_template).render(**full_context)
        return subject, body

    def _dispatch(
        self,
        template: NotificationTemplate,
        recipients: Callable[[], List[Recipient]],
        context: Dict[str, Any],
    ) -> bool:
        if not settings.notifications_enabled:
            prometheus_metrics.record_notification(template.type, "skipped")
            return False

        try:
            sent_all = True
            for email, name in recipients():
                subject, body = self.render(template, {**context, "recipient_name": name})
                sent = self.email_service.send_email(
                    to_email=email, subject=subject, body_html=body, tags=[template.type]
                )
                sent_all = sent_all and bool(sent)
            prometheus_metrics.record_notification(
                template.type, "sent" if sent_all else "failed"
            )
            return sent_all
        except Exception as e:
            self.logger.error(f"Failed to send {template.type} notification: {str(e)}")
            prometheus_metrics.record_notification(template.type, "failed")
            return False

    def _booking_parties(self, booking: Booking) -> List[Recipient]:
        return self._customer(booking) + self._provider_by_id(booking.provider_id)

    def _customer(self, booking: Booking) -> List[Recipient]:
        user = self.user_repository.get_by_id(booking.user_id)
        return [(user.email, user.full_name)] if user else []

    def _provider_by_id(self, provider_id: Optional[str]) -> List[Recipient]:
        if not provider_id:
            return []
        provider = self.provider_repository.get_by_id(provider_id, load_relationships=False)
        return [(provider.email, provider.name)] if provider else []
