"""Refund policy evaluation for cancelled or cancellable bookings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.config import settings
from ..models.booking import BookingStatus, PaymentStatus

CENT = Decimal("0.01")


@dataclass(frozen=True)
class RefundPolicyResult:
    refund_amount: Decimal
    refund_percent: int
    hours_before_start: float
    policy_basis: str = ""

    @property
    def eligible(self) -> bool:
        return self.refund_amount > 0

    def to_payload(self) -> dict[str, object]:
        return {
            "refund_amount": str(self.refund_amount),
            "refund_percent": self.refund_percent,
            "hours_before_start": round(self.hours_before_start, 2),
            "policy_basis": self.policy_basis,
            "eligible": self.eligible,
        }


class RefundPolicyEngine:
    """
    Determines how much of a booking's amount is refundable.

    The engine is pure: the same inputs always give the same result, and the
    result never exceeds ``total_amount`` nor grows as the appointment
    approaches.
    """

    def __init__(
        self,
        full_notice_hours: int | None = None,
        late_percent: int | None = None,
    ) -> None:
        self.full_notice_hours = (
            settings.refund_full_notice_hours if full_notice_hours is None else full_notice_hours
        )
        self.late_percent = settings.refund_late_percent if late_percent is None else late_percent
        if not 0 <= self.late_percent <= 100:
            raise ValueError("late_percent must be between 0 and 100")

    def evaluate(
        self,
        total_amount: Decimal,
        scheduled_start: datetime,
        now: datetime,
        payment_status: str,
        status: str,
    ) -> RefundPolicyResult:
        """
        Evaluate the refund for a booking.

        ``scheduled_start`` and ``now`` must both be aware or both naive.
        """
        hours_before_start = (scheduled_start - now).total_seconds() / 3600

        if payment_status != PaymentStatus.PAID.value:
            return self._result(
                total_amount, 0, hours_before_start, "Booking has not been paid"
            )

        if status == BookingStatus.COMPLETED.value:
            return self._result(
                total_amount, 0, hours_before_start, "Completed bookings are not refundable"
            )

        if hours_before_start >= self.full_notice_hours:
            return self._result(
                total_amount,
                100,
                hours_before_start,
                f">={self.full_notice_hours} hours before start: full refund",
            )
        if hours_before_start > 0:
            return self._result(
                total_amount,
                self.late_percent,
                hours_before_start,
                f"<{self.full_notice_hours} hours before start: {self.late_percent}% refund",
            )
        return self._result(
            total_amount, 0, hours_before_start, "Appointment already started: no refund"
        )

    @staticmethod
    def _result(
        total_amount: Decimal, percent: int, hours_before_start: float, basis: str
    ) -> RefundPolicyResult:
        total = Decimal(total_amount or 0)
        amount = (total * Decimal(percent) / Decimal(100)).quantize(CENT, rounding=ROUND_HALF_UP)
        amount = min(max(amount, Decimal("0.00")), total.quantize(CENT))
        return RefundPolicyResult(
            refund_amount=amount,
            refund_percent=percent,
            hours_before_start=hours_before_start,
            policy_basis=basis,
        )
