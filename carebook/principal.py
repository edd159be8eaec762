"""Caller identity passed explicitly into every booking operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.enums import UserRole


@dataclass(frozen=True)
class Actor:
    """
    The authenticated caller of a service operation.

    ``provider_id`` is set only for callers acting as a provider and links the
    caller's user account to their provider profile.
    """

    user_id: str
    role: UserRole
    provider_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_provider(self) -> bool:
        return self.role == UserRole.PROVIDER and self.provider_id is not None

    def owns_booking(self, booking_user_id: str) -> bool:
        return self.user_id == booking_user_id

    def is_assigned_to(self, booking_provider_id: Optional[str]) -> bool:
        return (
            self.is_provider
            and booking_provider_id is not None
            and booking_provider_id == self.provider_id
        )
