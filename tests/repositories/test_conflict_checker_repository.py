"""Queries backing the conflict checker."""

from datetime import time, timedelta

from carebook.models import BookingStatus
from carebook.repositories import RepositoryFactory


def test_returns_only_blocking_bookings_for_that_day(db, provider, make_booking, today):
    day = today + timedelta(days=3)
    confirmed = make_booking(
        status=BookingStatus.CONFIRMED, provider=provider, scheduled_time=time(15, 0)
    )
    in_progress = make_booking(
        status=BookingStatus.IN_PROGRESS, provider=provider, scheduled_time=time(9, 0)
    )
    make_booking(status=BookingStatus.PENDING, provider=provider)
    make_booking(status=BookingStatus.CANCELLED, provider=provider)
    make_booking(status=BookingStatus.COMPLETED, provider=provider)
    make_booking(
        status=BookingStatus.CONFIRMED, provider=provider, scheduled_date=day + timedelta(days=1)
    )

    repo = RepositoryFactory.create_conflict_checker_repository(db)
    rows = repo.get_bookings_for_conflict_check(provider.id, day)

    assert [b.id for b in rows] == [in_progress.id, confirmed.id]


def test_excludes_given_booking(db, provider, make_booking, today):
    booking = make_booking(status=BookingStatus.CONFIRMED, provider=provider)

    repo = RepositoryFactory.create_conflict_checker_repository(db)

    rows = repo.get_bookings_for_conflict_check(provider.id, booking.scheduled_date, booking.id)

    assert rows == []


def test_batch_lookup_covers_several_providers(db, make_provider, nursing_service, make_booking):
    first = make_provider(services=[nursing_service])
    second = make_provider(services=[nursing_service])
    third = make_provider(services=[nursing_service])
    a = make_booking(status=BookingStatus.CONFIRMED, provider=first)
    b = make_booking(status=BookingStatus.IN_PROGRESS, provider=second, scheduled_time=time(12, 0))
    make_booking(status=BookingStatus.CONFIRMED, provider=third)

    repo = RepositoryFactory.create_conflict_checker_repository(db)
    rows = repo.get_blocking_bookings_for_providers([first.id, second.id], a.scheduled_date)

    assert {row.id for row in rows} == {a.id, b.id}
    assert repo.get_blocking_bookings_for_providers([], a.scheduled_date) == []
