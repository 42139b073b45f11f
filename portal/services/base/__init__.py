"""
Service base package: result types and the shared service base class.
"""

from portal.services.base.base_service import BaseService
from portal.services.base.service_result import ErrorCode, ServiceError, ServiceResult

__all__ = [
    "BaseService",
    "ErrorCode",
    "ServiceError",
    "ServiceResult",
]
