"""
Application exceptions for the communications portal.

Repositories and services raise these; ``portal.core.error_handlers``
renders them as ``{"error": {"code", "message", "details"}}`` with the
exception's HTTP status. Each subclass fixes its own code and status.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes returned to API clients"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Workflow
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"

    # Authentication & Authorization
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"

    # Storage and external services
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"


class BaseAppException(Exception):
    """
    Root of the portal's exceptions.

    ``error_code`` and ``status_code`` default to the class attributes, so
    subclasses only pass a message and details.
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.error_code.value,
                "message": self.message,
                "details": self.details,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class NotFoundError(BaseAppException):
    error_code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource_type: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource_type} not found"
        if resource_id:
            message += f" (ID: {resource_id})"
        super().__init__(
            message,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidStateTransitionError(BaseAppException):
    """The submission is no longer in a state that allows the action."""

    error_code = ErrorCode.INVALID_STATE_TRANSITION
    status_code = 409

    def __init__(self, resource_id: str, current_status: Optional[str], action: str):
        super().__init__(
            f"Cannot {action} submission in {current_status} status",
            details={
                "resource_id": resource_id,
                "current_status": current_status,
                "action": action,
            },
        )


class ValidationError(BaseAppException):
    """Request payload failed schema validation."""

    error_code = ErrorCode.VALIDATION_ERROR
    status_code = 422

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, details={"field_errors": field_errors} if field_errors else None)


class ConflictError(BaseAppException):
    error_code = ErrorCode.CONFLICT
    status_code = 409

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class AuthenticationError(BaseAppException):
    error_code = ErrorCode.UNAUTHENTICATED
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(BaseAppException):
    """Authenticated, but not allowed to act on this resource."""

    error_code = ErrorCode.FORBIDDEN
    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)


class UpstreamFailureError(BaseAppException):
    """Storage or an external service is unavailable; the caller may retry."""

    error_code = ErrorCode.UPSTREAM_FAILURE
    status_code = 503

    def __init__(
        self,
        message: str = "A backing service is unavailable, please try again",
        service: Optional[str] = None,
    ):
        super().__init__(message, details={"service": service} if service else None)


class RepositoryError(UpstreamFailureError):
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, service="database")


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'NotFoundError',
    'InvalidStateTransitionError',
    'ValidationError',
    'ConflictError',
    'AuthenticationError',
    'ForbiddenError',
    'UpstreamFailureError',
    'RepositoryError',
]
