"""Coordinator review queue: list, approve, reject, history."""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from portal.api import deps
from portal.core.logging import get_logger
from portal.core.security import Principal
from portal.schemas.announcement import AnnouncementResponse
from portal.schemas.approval import (
    ApprovalAction,
    ApprovalActionRequest,
    ApprovalHistoryEntry,
    ApprovalResponse,
    ApprovalStatus,
    BulkApprovalResponse,
)
from portal.services.approval import ApprovalWorkflowService

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/approvals", tags=["Approvals"])


@router.get("", response_model=List[AnnouncementResponse])
def list_approvals(
    status: ApprovalStatus = Query(default=ApprovalStatus.PENDING),
    requires_approval: Optional[bool] = Query(default=None),
    principal: Principal = Depends(deps.require_approval_access),
    service: ApprovalWorkflowService = Depends(deps.get_approval_service),
) -> List[AnnouncementResponse]:
    """Submissions in a status, oldest first."""
    records = deps.raise_for_result(
        service.list_by_status(
            status.value,
            requires_approval=requires_approval,
            principal=principal,
        )
    )
    return [AnnouncementResponse.model_validate(record) for record in records]


@router.post("", response_model=Union[BulkApprovalResponse, ApprovalResponse])
def act_on_approvals(
    payload: ApprovalActionRequest,
    principal: Principal = Depends(deps.require_approval_access),
    service: ApprovalWorkflowService = Depends(deps.get_approval_service),
) -> Union[BulkApprovalResponse, ApprovalResponse]:
    """
    Approve or reject one submission, or a batch when ``bulk`` is set.

    The reviewer is always the authenticated principal.
    """
    if payload.approver_email and payload.approver_email.strip().lower() != principal.email:
        logger.warning(
            f"Ignoring approverEmail {payload.approver_email!r} sent by {principal.email}"
        )

    if payload.bulk:
        if payload.action == ApprovalAction.APPROVE:
            result = service.bulk_approve(payload.record_ids, principal)
        else:
            result = service.bulk_reject(payload.record_ids, principal, payload.rejection_reason)
        outcome = deps.raise_for_result(result)
        return BulkApprovalResponse(
            success=True,
            all_succeeded=outcome.all_succeeded,
            processed=outcome.processed,
            succeeded=outcome.succeeded,
            failed=outcome.failed,
            message=outcome.message,
            results=outcome.results,
        )

    if payload.action == ApprovalAction.APPROVE:
        result = service.approve(payload.record_id, principal)
    else:
        result = service.reject(payload.record_id, principal, payload.rejection_reason)
    announcement = deps.raise_for_result(result)
    return ApprovalResponse(
        success=True,
        message=result.message,
        approval=AnnouncementResponse.model_validate(announcement),
    )


@router.get("/{announcement_id}/history", response_model=List[ApprovalHistoryEntry])
def get_approval_history(
    announcement_id: str,
    principal: Principal = Depends(deps.require_approval_access),
    service: ApprovalWorkflowService = Depends(deps.get_approval_service),
) -> List[ApprovalHistoryEntry]:
    entries = deps.raise_for_result(service.get_history(announcement_id))
    return [ApprovalHistoryEntry.model_validate(entry) for entry in entries]
