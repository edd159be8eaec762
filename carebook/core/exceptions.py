# carebook/core/exceptions.py
"""
Domain-specific exceptions for the CareBook platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.

Booking lifecycle failures fall into four kinds, each tagged by ``code``:

- NotFoundException: a referenced booking/provider/service/user is missing
- InvalidTransitionException: status change not allowed from current status
- InvalidArgumentException: a supplied value violates a precondition
- InvalidOperationException: action not permitted in the entity's state
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to HTTPException using the class status code."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails for infrastructure reasons."""


# Booking lifecycle exceptions


class InvalidTransitionException(ConflictException):
    """Raised when a booking cannot move from its current status to the requested one."""

    def __init__(self, current_status: str, target_status: str, message: Optional[str] = None):
        super().__init__(
            message=message
            or f"Cannot change booking status from {current_status} to {target_status}",
            code="INVALID_TRANSITION",
            details={"current_status": current_status, "target_status": target_status},
        )
        self.current_status = current_status
        self.target_status = target_status


class InvalidArgumentException(ValidationException):
    """Raised when a supplied value violates a precondition (past date, missing reason)."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_ARGUMENT", details=details)


class InvalidOperationException(BusinessRuleException):
    """Raised when an action is not permitted given the entity's current state."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_OPERATION", details=details)


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with a provider's existing bookings."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
