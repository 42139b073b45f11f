"""
FastAPI dependencies shared by the v1 endpoints.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from portal.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(principal = Depends(deps.get_current_principal)):
        return principal
"""

from functools import lru_cache
from typing import NoReturn, Optional, TypeVar

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from portal.config import Settings, get_settings
from portal.core.exceptions import (
    AuthenticationError,
    BaseAppException,
    ErrorCode,
    ForbiddenError,
)
from portal.core.logging import get_logger, user_id
from portal.core.security import JWTManager, Permission, Principal, resolve_principal
from portal.db.session import get_db
from portal.repositories import AnnouncementRepository, MinistryRepository
from portal.services.announcement import AnnouncementService
from portal.services.approval import ApprovalWorkflowService
from portal.services.base import ServiceResult
from portal.services.ministry import MinistryService
from portal.services.notification import (
    NotificationDispatcher,
    NotificationSender,
    build_notification_sender,
)

logger = get_logger(__name__)

T = TypeVar("T")

_bearer = HTTPBearer(auto_error=False)


# --- Authentication & Authorization -------------------------------------------

@lru_cache()
def get_jwt_manager() -> JWTManager:
    config = get_settings()
    return JWTManager(
        secret_key=config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        access_token_expire_minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    config: Settings = Depends(get_settings),
) -> Principal:
    """Resolve the bearer token to the acting staff member."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    try:
        payload = jwt_manager.verify_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")

    principal = resolve_principal(payload["sub"], config)
    user_id.set(principal.email)
    return principal


def require_approval_access(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.has_permission(Permission.REVIEW_APPROVALS):
        raise ForbiddenError("Approval access required")
    return principal


def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.has_permission(Permission.MANAGE_MINISTRIES):
        raise ForbiddenError("Administrator access required")
    return principal


# --- Services -----------------------------------------------------------------

@lru_cache()
def get_notification_sender() -> NotificationSender:
    return build_notification_sender(get_settings())


def get_notification_dispatcher(
    sender: NotificationSender = Depends(get_notification_sender),
) -> NotificationDispatcher:
    return NotificationDispatcher(sender)


def get_ministry_service(
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> MinistryService:
    return MinistryService(MinistryRepository(db), db, config=config)


def get_announcement_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> AnnouncementService:
    return AnnouncementService(
        AnnouncementRepository(db),
        db,
        ministry_repository=MinistryRepository(db),
        dispatcher=dispatcher,
    )


def get_approval_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    config: Settings = Depends(get_settings),
) -> ApprovalWorkflowService:
    return ApprovalWorkflowService(AnnouncementRepository(db), db, dispatcher, config=config)


# --- Results ------------------------------------------------------------------

_STATUS_BY_CODE = {
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INVALID_STATE_TRANSITION: 409,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.UPSTREAM_FAILURE: 503,
}


def _raise_error(result: ServiceResult) -> NoReturn:
    error = result.error
    if error is None:
        raise BaseAppException("Operation failed")
    details = dict(error.details or {})
    if error.field:
        details.setdefault("field", error.field)
    raise BaseAppException(
        error.message,
        error_code=error.code,
        details=details,
        status_code=_STATUS_BY_CODE.get(error.code, 500),
    )


def raise_for_result(result: ServiceResult[T]) -> T:
    """Return the result's data, or raise the matching application exception."""
    if not result.is_success:
        _raise_error(result)
    return result.data


__all__ = [
    "get_db",
    "get_settings",
    "get_jwt_manager",
    "get_current_principal",
    "require_approval_access",
    "require_admin",
    "get_notification_sender",
    "get_notification_dispatcher",
    "get_ministry_service",
    "get_announcement_service",
    "get_approval_service",
    "raise_for_result",
]
