"""
Result type returned by every service operation.

Services never raise for expected failures (missing rows, bad arguments,
invalid transitions); they return a failed ``ServiceResult`` carrying an
``ErrorCode``. The API layer turns that into an HTTP error.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from portal.core.exceptions import BaseAppException, ErrorCode


@dataclass(frozen=True)
class ServiceError:
    """Why an operation failed."""

    code: ErrorCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    # Request field the error refers to, in its wire (camelCase) spelling
    field: Optional[str] = None


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Outcome of a service call.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: Error information (if failed)
        message: Human-readable status message
        metadata: Counts and other context for logging and responses
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ) -> "ServiceResult[TData]":
        error = ServiceError(code=code, message=message, details=details or {}, field=field)
        return cls(is_success=False, error=error, message=message)

    @classmethod
    def from_app_exception(cls, exception: BaseAppException) -> "ServiceResult[TData]":
        """Failed result carrying the exception's own code and details."""
        return cls.failure(exception.error_code, exception.message, details=exception.details)

    @classmethod
    def invalid_argument(cls, message: str, field: Optional[str] = None) -> "ServiceResult[TData]":
        return cls.failure(ErrorCode.INVALID_ARGUMENT, message, field=field)

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def __repr__(self) -> str:
        if self.is_success:
            return f"ServiceResult(Success: {self.message})" if self.message else "ServiceResult(Success)"
        return f"ServiceResult(Failure {self.error.code.value}: {self.error.message})"


__all__ = [
    "ErrorCode",
    "ServiceError",
    "ServiceResult",
]
