"""
Exception handlers that render application errors as JSON responses.

Every error body has the shape ``{"error": {"code", "message", "details"}}``.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from portal.core.exceptions import (
    BaseAppException,
    ErrorCode,
    RepositoryError,
    ValidationError,
)
from portal.core.logging import get_logger
from portal.core.middleware import get_request_id

logger = get_logger(__name__)


def _format_validation_errors(errors) -> list:
    """Flatten pydantic error entries into field/message pairs."""
    formatted = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        formatted.append({
            "field": ".".join(location) or None,
            "message": error.get("msg"),
            "type": error.get("type"),
        })
    return formatted


async def handle_application_exception(request: Request, exc: BaseAppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "request_id": get_request_id(request),
            "path": request.url.path,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        message="Request validation failed",
        field_errors=_format_validation_errors(exc.errors()),
    )
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder(error.to_dict()),
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Unhandled database error: {exc}",
        extra={"request_id": get_request_id(request), "path": request.url.path},
        exc_info=exc,
    )
    error = RepositoryError("The database is unavailable, please try again")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unexpected error: {exc}",
        extra={"request_id": get_request_id(request), "path": request.url.path},
        exc_info=exc,
    )
    error = BaseAppException("An unexpected error occurred", ErrorCode.INTERNAL_ERROR)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the portal's exception handlers to the application."""
    app.add_exception_handler(BaseAppException, handle_application_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)
