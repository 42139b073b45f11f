"""
Approval workflow schemas: review actions, bulk outcomes and history.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from portal.schemas.announcement import AnnouncementResponse
from portal.schemas.common.base import BaseSchema

__all__ = [
    "ApprovalStatus",
    "ApprovalAction",
    "ApprovalActionRequest",
    "ItemOutcome",
    "ApprovalResponse",
    "BulkApprovalResponse",
    "ApprovalHistoryEntry",
]


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ApprovalActionRequest(BaseSchema):
    """
    Body of ``POST /admin/approvals``.

    Single: ``{recordId, action, rejectionReason?}``.
    Bulk: ``{bulk: true, recordIds: [...], action, rejectionReason?}``.
    """

    action: ApprovalAction
    record_id: Optional[str] = None
    record_ids: Optional[List[str]] = None
    bulk: bool = False
    # Blank reasons are rejected by the workflow, not here, so that the
    # caller gets an INVALID_ARGUMENT rather than a schema error.
    rejection_reason: Optional[str] = None
    # Accepted for compatibility with older clients; the acting reviewer is
    # always the authenticated principal.
    approver_email: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self) -> "ApprovalActionRequest":
        if self.bulk:
            if self.record_ids is None:
                raise ValueError("recordIds is required for bulk actions")
        elif not self.record_id:
            raise ValueError("recordId is required")
        return self


class ItemOutcome(BaseSchema):
    """Result of one id within a bulk action."""

    id: str
    ok: bool
    error: Optional[str] = None
    message: Optional[str] = None


class ApprovalResponse(BaseSchema):
    success: bool = True
    message: str
    approval: AnnouncementResponse


class BulkApprovalResponse(BaseSchema):
    success: bool = True
    all_succeeded: bool
    processed: int
    succeeded: int
    failed: int
    message: str
    results: List[ItemOutcome] = Field(default_factory=list)


class ApprovalHistoryEntry(BaseSchema):
    id: str
    announcement_id: str
    action: str
    previous_status: Optional[str] = None
    new_status: str
    performed_by: Optional[str] = None
    notes: Optional[str] = None
    performed_at: datetime
