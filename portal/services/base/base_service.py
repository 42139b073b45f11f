"""
Base service class shared by the portal's services.
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.exceptions import BaseAppException, ErrorCode
from portal.core.logging import get_logger
from portal.repositories.base.base_repository import BaseRepository
from portal.services.base.service_result import ServiceResult

TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(Generic[TRepo]):
    """
    Holds the repository and session, owns the transaction boundary and
    turns exceptions into failed ``ServiceResult`` values.
    """

    def __init__(self, repository: TRepo, db_session: Session):
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(f"portal.services.{self.__class__.__name__}")

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
    ) -> ServiceResult:
        """
        Convert an exception raised during ``operation`` into a failure.

        Application errors keep their own code and are logged at info.
        Database errors become UPSTREAM_FAILURE so the caller can retry;
        anything else is INTERNAL_ERROR. Both are logged with a traceback.
        """
        ref = str(entity_ref) if entity_ref is not None else None

        if isinstance(exception, BaseAppException):
            self._logger.info(f"{operation} failed: {exception}", extra={"entity_ref": ref})
            return ServiceResult.from_app_exception(exception)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra={
                "operation": operation,
                "entity_ref": ref,
                "exception_type": type(exception).__name__,
            },
        )
        if isinstance(exception, SQLAlchemyError):
            return ServiceResult.failure(
                ErrorCode.UPSTREAM_FAILURE,
                f"Database error during {operation}, please try again",
                details={"entity_ref": ref},
            )
        return ServiceResult.failure(
            ErrorCode.INTERNAL_ERROR,
            f"Failed to {operation}",
            details={"entity_ref": ref},
        )

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit when the block finishes, roll back if it raises.

        Example:
            with self.transaction():
                self.repository.create(entity)
        """
        try:
            yield self.db
            self.db.commit()
        except Exception:
            try:
                self.db.rollback()
            except SQLAlchemyError as e:
                # Keep the original error
                self._logger.warning(f"Rollback failed: {e}")
            raise
