"""Shared enumerations used across layers."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a caller can act under."""

    CUSTOMER = "CUSTOMER"
    PROVIDER = "PROVIDER"
    ADMIN = "ADMIN"
