# tests/conftest.py
"""
Pytest configuration.

Every test that touches the database gets a fresh in-memory SQLite schema.
Fixtures create a small catalog: one customer, one admin, two verified
providers offering a one-hour home nursing visit.
"""

import os

# Set testing mode BEFORE any app imports
os.environ["is_testing"] = "true"

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from carebook.api.dependencies import get_db
from carebook.core.config import settings
from carebook.core.enums import UserRole
from carebook.core.timezone_utils import get_platform_today
from carebook.database import Base
from carebook.main import app
from carebook.models import (
    AvailabilityStatus,
    Booking,
    BookingStatus,
    PaymentStatus,
    Provider,
    Service,
    User,
)
from carebook.principal import Actor
from carebook.services.booking_rejection_service import BookingRejectionService
from carebook.services.booking_service import BookingService
from carebook.services.email_console import ConsoleEmailService
from carebook.services.notification_service import NotificationService

settings.is_testing = True

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db():
    """Create a new database session with a fresh schema for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture(autouse=True)
def notifications_enabled():
    """Keep notification dispatch on unless a test turns it off."""
    original = settings.notifications_enabled
    settings.notifications_enabled = True
    yield
    settings.notifications_enabled = original


# ============================================================================
# Catalog fixtures
# ============================================================================


@pytest.fixture
def today() -> date:
    return get_platform_today()


@pytest.fixture
def customer(db: Session) -> User:
    user = User(
        email="asha.customer@example.com",
        full_name="Asha Rao",
        phone="+919800000001",
        role=UserRole.CUSTOMER.value,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_customer(db: Session) -> User:
    user = User(
        email="vikram.customer@example.com",
        full_name="Vikram Shah",
        role=UserRole.CUSTOMER.value,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin_user(db: Session) -> User:
    user = User(email="admin@example.com", full_name="Ops Admin", role=UserRole.ADMIN.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def nursing_service(db: Session) -> Service:
    service = Service(
        name="Home Nursing Visit",
        description="Vitals check, dressing and medication support",
        price=Decimal("1500.00"),
        duration_hours=1,
    )
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def physio_service(db: Session) -> Service:
    service = Service(name="Physiotherapy Session", price=Decimal("2000.00"), duration_hours=2)
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def make_provider(db: Session) -> Callable[..., Provider]:
    counter = {"n": 0}

    def _make(
        *,
        services: Optional[list] = None,
        availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE,
        is_verified: bool = True,
        name: Optional[str] = None,
        with_user: bool = True,
    ) -> Provider:
        counter["n"] += 1
        n = counter["n"]
        user_id = None
        if with_user:
            user = User(
                email=f"provider{n}@example.com",
                full_name=name or f"Provider {n}",
                role=UserRole.PROVIDER.value,
            )
            db.add(user)
            db.flush()
            user_id = user.id
        provider = Provider(
            user_id=user_id,
            name=name or f"Provider {n}",
            email=f"provider{n}.profile@example.com",
            qualification="BSc Nursing",
            experience_years=5,
            availability_status=availability_status.value,
            is_verified=is_verified,
            services=list(services or []),
        )
        db.add(provider)
        db.commit()
        return provider

    return _make


@pytest.fixture
def provider(make_provider, nursing_service: Service) -> Provider:
    return make_provider(services=[nursing_service], name="Meera Nair")


@pytest.fixture
def make_booking(db: Session, customer: User, nursing_service: Service) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing lifecycle rules."""

    def _make(
        *,
        status: BookingStatus = BookingStatus.PENDING,
        provider: Optional[Provider] = None,
        scheduled_date: Optional[date] = None,
        scheduled_time: time = time(10, 0),
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        service: Optional[Service] = None,
        user: Optional[User] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        service = service or nursing_service
        booking = Booking(
            user_id=(user or customer).id,
            provider_id=provider.id if provider else None,
            service_id=service.id,
            service_name=service.name,
            duration_hours=service.duration_hours,
            total_amount=service.price,
            scheduled_date=scheduled_date or get_platform_today() + timedelta(days=3),
            scheduled_time=scheduled_time,
            status=status.value,
            payment_status=payment_status.value,
            notes=notes,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


# ============================================================================
# Actors and services
# ============================================================================


@pytest.fixture
def customer_actor(customer: User) -> Actor:
    return Actor(user_id=customer.id, role=UserRole.CUSTOMER)


@pytest.fixture
def admin_actor(admin_user: User) -> Actor:
    return Actor(user_id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture
def provider_actor(provider: Provider) -> Actor:
    return Actor(user_id=provider.user_id, role=UserRole.PROVIDER, provider_id=provider.id)


@pytest.fixture
def email_outbox() -> ConsoleEmailService:
    return ConsoleEmailService()


@pytest.fixture
def notification_service(db: Session, email_outbox: ConsoleEmailService) -> NotificationService:
    return NotificationService(db, email_service=email_outbox)


@pytest.fixture
def booking_service(db: Session, notification_service: NotificationService) -> BookingService:
    return BookingService(db, notification_service=notification_service)


@pytest.fixture
def rejection_service(
    db: Session, booking_service: BookingService, notification_service: NotificationService
) -> BookingRejectionService:
    return BookingRejectionService(
        db, booking_service=booking_service, notification_service=notification_service
    )
