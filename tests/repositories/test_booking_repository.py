"""BookingRepository listings and aggregates."""

from datetime import timedelta
from decimal import Decimal

from carebook.models import BookingStatus
from carebook.repositories import RepositoryFactory


def test_list_bookings_filters_combine(db, make_booking, provider, other_customer):
    mine = make_booking(status=BookingStatus.CONFIRMED, provider=provider)
    make_booking(status=BookingStatus.PENDING, provider=provider)
    make_booking(status=BookingStatus.CONFIRMED, user=other_customer)

    repo = RepositoryFactory.create_booking_repository(db)
    rows = repo.list_bookings(provider_id=provider.id, status=BookingStatus.CONFIRMED.value)

    assert [b.id for b in rows] == [mine.id]


def test_list_bookings_newest_appointment_first_with_paging(db, make_booking, today):
    early = make_booking(scheduled_date=today + timedelta(days=1))
    late = make_booking(scheduled_date=today + timedelta(days=5))

    repo = RepositoryFactory.create_booking_repository(db)

    assert [b.id for b in repo.list_bookings()] == [late.id, early.id]
    assert [b.id for b in repo.list_bookings(skip=1, limit=1)] == [early.id]


def test_list_unassigned_skips_assigned_and_finished(db, make_booking, provider):
    waiting = make_booking()
    make_booking(provider=provider)
    make_booking(status=BookingStatus.CANCELLED)
    make_booking(status=BookingStatus.COMPLETED)

    repo = RepositoryFactory.create_booking_repository(db)

    assert [b.id for b in repo.list_unassigned()] == [waiting.id]


def test_provider_has_other_in_progress(db, make_booking, provider):
    current = make_booking(status=BookingStatus.IN_PROGRESS, provider=provider)
    repo = RepositoryFactory.create_booking_repository(db)

    assert repo.provider_has_other_in_progress(provider.id, current.id) is False

    other = make_booking(status=BookingStatus.IN_PROGRESS, provider=provider)
    assert repo.provider_has_other_in_progress(provider.id, current.id) is True
    assert repo.provider_has_other_in_progress(provider.id, other.id) is True


def test_count_by_status_reports_every_status(db, make_booking):
    make_booking()
    make_booking()
    make_booking(status=BookingStatus.COMPLETED)

    counts = RepositoryFactory.create_booking_repository(db).count_by_status()

    assert counts == {
        "PENDING": 2,
        "CONFIRMED": 0,
        "IN_PROGRESS": 0,
        "COMPLETED": 1,
        "CANCELLED": 0,
    }


def test_completed_revenue(db, make_booking, physio_service):
    repo = RepositoryFactory.create_booking_repository(db)
    assert repo.completed_revenue() == Decimal("0.00")

    make_booking(status=BookingStatus.COMPLETED)
    make_booking(status=BookingStatus.COMPLETED, service=physio_service)
    make_booking(status=BookingStatus.CONFIRMED)

    assert repo.completed_revenue() == Decimal("3500.00")
