"""Refund policy: tiers, bounds, monotonicity and determinism."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from carebook.models.booking import BookingStatus, PaymentStatus
from carebook.services.refund_policy_engine import RefundPolicyEngine

START = datetime(2030, 6, 1, 10, 0, tzinfo=timezone.utc)
PAID = PaymentStatus.PAID.value
CONFIRMED = BookingStatus.CONFIRMED.value


@pytest.fixture
def engine() -> RefundPolicyEngine:
    return RefundPolicyEngine(full_notice_hours=24, late_percent=50)


def refund(engine, hours_before: float, amount: str = "1500.00", **overrides) -> Decimal:
    kwargs = dict(
        total_amount=Decimal(amount),
        scheduled_start=START,
        now=START - timedelta(hours=hours_before),
        payment_status=PAID,
        status=CONFIRMED,
    )
    kwargs.update(overrides)
    return engine.evaluate(**kwargs).refund_amount


def test_full_refund_with_at_least_full_notice(engine):
    assert refund(engine, 24) == Decimal("1500.00")
    assert refund(engine, 72) == Decimal("1500.00")


def test_partial_refund_inside_notice_window(engine):
    assert refund(engine, 23.9) == Decimal("750.00")
    assert refund(engine, 0.1) == Decimal("750.00")


def test_no_refund_once_appointment_started(engine):
    assert refund(engine, 0) == Decimal("0.00")
    assert refund(engine, -3) == Decimal("0.00")


def test_unpaid_booking_gets_nothing(engine):
    for status in (PaymentStatus.PENDING, PaymentStatus.FAILED, PaymentStatus.REFUNDED):
        assert refund(engine, 48, payment_status=status.value) == Decimal("0.00")


def test_completed_booking_gets_nothing(engine):
    assert refund(engine, 48, status=BookingStatus.COMPLETED.value) == Decimal("0.00")


def test_cancelled_paid_booking_is_refundable(engine):
    assert refund(engine, 48, status=BookingStatus.CANCELLED.value) == Decimal("1500.00")


def test_amount_is_rounded_to_cents(engine):
    assert refund(engine, 2, amount="999.99") == Decimal("500.00")


@pytest.mark.parametrize("amount", ["0.00", "0.01", "999.99", "1500.00", "123456.78"])
def test_refund_is_bounded_and_non_increasing(engine, amount):
    lead_times = [96, 48, 24.5, 24, 23.99, 12, 1, 0.01, 0, -0.5, -24]
    amounts = [refund(engine, hours, amount=amount) for hours in lead_times]

    for value in amounts:
        assert Decimal("0") <= value <= Decimal(amount)
    for earlier, later in zip(amounts, amounts[1:]):
        assert earlier >= later


def test_evaluation_is_deterministic(engine):
    first = engine.evaluate(Decimal("1500.00"), START, START - timedelta(hours=5), PAID, CONFIRMED)
    second = engine.evaluate(Decimal("1500.00"), START, START - timedelta(hours=5), PAID, CONFIRMED)
    assert first == second


def test_result_payload_describes_policy(engine):
    result = engine.evaluate(Decimal("1500.00"), START, START - timedelta(hours=5), PAID, CONFIRMED)
    payload = result.to_payload()

    assert payload["refund_amount"] == "750.00"
    assert payload["refund_percent"] == 50
    assert payload["eligible"] is True
    assert "50%" in payload["policy_basis"]


def test_custom_tiers():
    generous = RefundPolicyEngine(full_notice_hours=6, late_percent=80)
    assert refund(generous, 6) == Decimal("1500.00")
    assert refund(generous, 5) == Decimal("1200.00")


def test_rejects_out_of_range_percent():
    with pytest.raises(ValueError):
        RefundPolicyEngine(full_notice_hours=24, late_percent=120)
