"""
Timezone utilities for the CareBook platform.

Scheduling rules ("is this date in the past?") are evaluated in the
platform timezone configured by ``settings.timezone``.
"""

from datetime import date, datetime, time

import pytz

from .config import settings


def get_platform_timezone() -> pytz.BaseTzInfo:
    """Return the configured platform timezone."""
    return pytz.timezone(settings.timezone)


def get_platform_now() -> datetime:
    """Current timezone-aware datetime in the platform timezone."""
    return datetime.now(get_platform_timezone())


def get_platform_today() -> date:
    """'Today' in the platform timezone."""
    return get_platform_now().date()


def localize_schedule(scheduled_date: date, scheduled_time: time) -> datetime:
    """
    Combine a naive booking date and time into an aware datetime.

    Bookings store wall-clock date/time in the platform timezone.
    """
    naive = datetime.combine(scheduled_date, scheduled_time)
    return get_platform_timezone().localize(naive)
