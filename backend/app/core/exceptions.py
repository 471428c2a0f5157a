# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the CoachPlanner platform.

Services raise these with business-focused messages; the API layer converts
them into HTTP problem responses via ``to_http_exception``.
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


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or "An error occurred processing your request", code, details)


# Specific business exceptions


class InsufficientCreditsException(ValidationException):
    """Raised when a student has no usable credits left."""

    def __init__(self, message: str = "You do not have enough credits"):
        super().__init__(message=message, code="INSUFFICIENT_CREDITS")


class ClassFullException(ConflictException):
    """Raised when a class session has no seats left."""

    def __init__(self, capacity: int):
        super().__init__(
            message="This class is full",
            code="CLASS_FULL",
            details={"capacity": capacity},
        )


class CancellationWindowClosedException(ValidationException):
    """Raised when a student cancels later than the organization allows."""

    def __init__(self, window_hours: int):
        super().__init__(
            message=f"Bookings can only be cancelled up to {window_hours} hours before the class",
            code="CANCELLATION_WINDOW_CLOSED",
            details={"cancellation_window_hours": window_hours},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
