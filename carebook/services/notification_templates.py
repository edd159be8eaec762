from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationTemplate:
    type: str
    subject_template: str
    body_template: str


BOOKING_CREATED = NotificationTemplate(
    type="booking_created",
    subject_template="Booking received: {{ booking.service_name }}",
    body_template=(
        "<p>Hi {{ recipient_name }},</p>"
        "<p>We received your booking for <strong>{{ booking.service_name }}</strong> on "
        "{{ booking.scheduled_date }} at {{ booking.scheduled_time }}.</p>"
        "<p>Total: {{ booking.total_amount }}. We will let you know once it is confirmed.</p>"
        "<p>{{ brand_name }}</p>"
    ),
)

BOOKING_STATUS_CHANGED = NotificationTemplate(
    type="booking_status_changed",
    subject_template="Your {{ booking.service_name }} booking is now {{ booking.status | lower }}",
    body_template=(
        "<p>Hi {{ recipient_name }},</p>"
        "<p>Booking {{ booking.id }} for {{ booking.service_name }} on "
        "{{ booking.scheduled_date }} at {{ booking.scheduled_time }} changed from "
        "{{ previous_status }} to {{ booking.status }}.</p>"
        "<p>{{ brand_name }}</p>"
    ),
)

BOOKING_RESCHEDULED = NotificationTemplate(
    type="booking_rescheduled",
    subject_template="Booking rescheduled: {{ booking.service_name }}",
    body_template=(
        "<p>Hi {{ recipient_name }},</p>"
        "<p>Your {{ booking.service_name }} appointment moved from {{ previous_date }} "
        "{{ previous_time }} to {{ booking.scheduled_date }} {{ booking.scheduled_time }}.</p>"
        "<p>{{ brand_name }}</p>"
    ),
)

PROVIDER_ASSIGNED = NotificationTemplate(
    type="provider_assigned",
    subject_template="New assignment: {{ booking.service_name }} on {{ booking.scheduled_date }}",
    body_template=(
        "<p>Hi {{ recipient_name }},</p>"
        "<p>You have been assigned booking {{ booking.id }} for {{ booking.service_name }} on "
        "{{ booking.scheduled_date }} at {{ booking.scheduled_time }} "
        "({{ booking.duration_hours }}h).</p>"
        "<p>{{ brand_name }}</p>"
    ),
)

REJECTION_REVIEWED = NotificationTemplate(
    type="rejection_reviewed",
    subject_template="Your rejection request was {{ request.status | lower }}",
    body_template=(
        "<p>Hi {{ recipient_name }},</p>"
        "<p>Your request to be released from booking {{ request.booking_id }} was "
        "{{ request.status | lower }}.</p>"
        "{% if request.admin_notes %}<p>Admin notes: {{ request.admin_notes }}</p>{% endif %}"
        "<p>{{ brand_name }}</p>"
    ),
)
