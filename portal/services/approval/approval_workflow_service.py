"""
Approval workflow service.

Handles:
- Single approve / reject of pending submissions
- Bulk approve / reject with per-item outcomes
- The coordinator's review queue, oldest first
- Approval history lookups

Every transition commits on its own before the submitter is notified, so
a notification failure never undoes a decision.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.config import Settings, settings as default_settings
from portal.core.exceptions import BaseAppException, ErrorCode, ForbiddenError
from portal.core.security.permissions import Principal
from portal.models.announcement import Announcement, ApprovalStatus
from portal.models.approval_history import ApprovalHistory, HistoryAction
from portal.repositories.announcement_repository import AnnouncementRepository
from portal.schemas.approval import ApprovalAction, ItemOutcome
from portal.services.base import BaseService, ServiceResult
from portal.services.notification import NotificationDispatcher, NotificationEvent


@dataclass
class BulkActionResult:
    """Per-item outcomes of a bulk approve or reject."""

    action: ApprovalAction
    results: List[ItemOutcome] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.results if item.ok)

    @property
    def failed(self) -> int:
        return self.processed - self.succeeded

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @property
    def message(self) -> str:
        verb = "approved" if self.action == ApprovalAction.APPROVE else "rejected"
        if self.all_succeeded:
            return f"All {self.processed} announcements {verb}"
        return f"{self.succeeded} of {self.processed} announcements {verb}"


class ApprovalWorkflowService(BaseService[AnnouncementRepository]):
    """
    Moves submissions from pending to approved or rejected.

    Approved and rejected are terminal. The status change itself is a
    conditional update in the repository, so two reviewers acting on the
    same submission at once cannot both succeed.
    """

    def __init__(
        self,
        repository: AnnouncementRepository,
        db_session: Session,
        dispatcher: NotificationDispatcher,
        config: Optional[Settings] = None,
    ):
        super().__init__(repository, db_session)
        self.dispatcher = dispatcher
        self.config = config or default_settings

    # -------------------------------------------------------------------------
    # Single transitions
    # -------------------------------------------------------------------------

    def approve(self, announcement_id: str, approver: Principal) -> ServiceResult[Announcement]:
        operation = "approve announcement"
        self._logger.info(f"{operation}: id={announcement_id}, by={approver.email}")
        try:
            announcement = self._transition(announcement_id, approver, ApprovalAction.APPROVE)
        except Exception as e:
            return self._handle_exception(e, operation, announcement_id)

        self.dispatcher.dispatch(NotificationEvent.APPROVED, announcement)
        return ServiceResult.success(announcement, message="Announcement approved")

    def reject(
        self,
        announcement_id: str,
        approver: Principal,
        reason: Optional[str],
    ) -> ServiceResult[Announcement]:
        operation = "reject announcement"
        reason = self._clean_reason(reason)
        if reason is None:
            return ServiceResult.invalid_argument(
                "A rejection reason is required", field="rejectionReason"
            )

        self._logger.info(f"{operation}: id={announcement_id}, by={approver.email}")
        try:
            announcement = self._transition(
                announcement_id, approver, ApprovalAction.REJECT, reason
            )
        except Exception as e:
            return self._handle_exception(e, operation, announcement_id)

        self.dispatcher.dispatch(NotificationEvent.REJECTED, announcement, {"reason": reason})
        return ServiceResult.success(announcement, message="Announcement rejected")

    # -------------------------------------------------------------------------
    # Bulk transitions
    # -------------------------------------------------------------------------

    def bulk_approve(
        self,
        announcement_ids: Sequence[str],
        approver: Principal,
    ) -> ServiceResult[BulkActionResult]:
        return self._bulk(announcement_ids, approver, ApprovalAction.APPROVE)

    def bulk_reject(
        self,
        announcement_ids: Sequence[str],
        approver: Principal,
        reason: Optional[str],
    ) -> ServiceResult[BulkActionResult]:
        reason = self._clean_reason(reason)
        if reason is None:
            return ServiceResult.invalid_argument(
                "A rejection reason is required", field="rejectionReason"
            )
        return self._bulk(announcement_ids, approver, ApprovalAction.REJECT, reason)

    def _bulk(
        self,
        announcement_ids: Sequence[str],
        approver: Principal,
        action: ApprovalAction,
        reason: Optional[str] = None,
    ) -> ServiceResult[BulkActionResult]:
        # Duplicates are processed once, in first-seen order
        ids = list(dict.fromkeys(announcement_ids or []))
        if not ids:
            return ServiceResult.invalid_argument("No announcements selected", field="recordIds")
        limit = self.config.APPROVAL_MAX_BULK_SIZE
        if len(ids) > limit:
            return ServiceResult.invalid_argument(
                f"At most {limit} announcements can be processed at once",
                field="recordIds",
            )

        self._logger.info(
            f"bulk {action.value}: {len(ids)} announcements by {approver.email}"
        )
        outcome = BulkActionResult(action=action)
        event = (
            NotificationEvent.APPROVED
            if action == ApprovalAction.APPROVE
            else NotificationEvent.REJECTED
        )
        extra = {"reason": reason} if reason else None

        for announcement_id in ids:
            try:
                announcement = self._transition(announcement_id, approver, action, reason)
            except BaseAppException as e:
                self._logger.info(f"bulk {action.value} skipped {announcement_id}: {e}")
                outcome.results.append(
                    ItemOutcome(
                        id=announcement_id,
                        ok=False,
                        error=e.error_code.value,
                        message=e.message,
                    )
                )
                continue
            except SQLAlchemyError as e:
                self._logger.error(
                    f"bulk {action.value} failed for {announcement_id}: {e}", exc_info=True
                )
                outcome.results.append(
                    ItemOutcome(
                        id=announcement_id,
                        ok=False,
                        error=ErrorCode.UPSTREAM_FAILURE.value,
                        message="Database error, please try again",
                    )
                )
                continue

            outcome.results.append(ItemOutcome(id=announcement_id, ok=True))
            self.dispatcher.dispatch(event, announcement, extra)

        return ServiceResult.success(
            outcome,
            message=outcome.message,
            metadata={"succeeded": outcome.succeeded, "failed": outcome.failed},
        )

    # -------------------------------------------------------------------------
    # Queue & history
    # -------------------------------------------------------------------------

    def list_by_status(
        self,
        status: str = ApprovalStatus.PENDING,
        requires_approval: Optional[bool] = None,
        principal: Optional[Principal] = None,
    ) -> ServiceResult[List[Announcement]]:
        """
        Submissions in ``status``, oldest first.

        A principal with an approval scope only sees submissions for the
        ministries in that scope.
        """
        operation = "list announcements by status"
        if status not in ApprovalStatus.ALL:
            return ServiceResult.invalid_argument(
                f"Unknown status '{status}'", field="status"
            )
        try:
            records = self.repository.list_by_status(status, requires_approval=requires_approval)
        except Exception as e:
            return self._handle_exception(e, operation, status)

        if principal is not None and principal.is_scoped:
            records = [record for record in records if principal.can_review(record.review_ministry)]
        return ServiceResult.success(records, metadata={"status": status, "count": len(records)})

    def get_history(self, announcement_id: str) -> ServiceResult[List[ApprovalHistory]]:
        operation = "get approval history"
        try:
            self.repository.get_by_id(announcement_id)
            return ServiceResult.success(self.repository.get_history(announcement_id))
        except Exception as e:
            return self._handle_exception(e, operation, announcement_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _transition(
        self,
        announcement_id: str,
        approver: Principal,
        action: ApprovalAction,
        reason: Optional[str] = None,
    ) -> Announcement:
        """Apply one transition in its own transaction and record it in history."""
        with self.transaction():
            current = self.repository.get_by_id(announcement_id)
            if not approver.can_review(current.review_ministry):
                raise ForbiddenError(
                    f"You cannot review announcements for '{current.review_ministry}'",
                    details={"resource_id": announcement_id, "ministry": current.review_ministry},
                )

            if action == ApprovalAction.APPROVE:
                announcement = self.repository.approve(announcement_id, approver.email)
                history_action = HistoryAction.APPROVED
            else:
                announcement = self.repository.reject(announcement_id, approver.email, reason)
                history_action = HistoryAction.REJECTED

            self.repository.record_history(
                announcement_id=announcement_id,
                action=history_action,
                performed_by=approver.email,
                previous_status=ApprovalStatus.PENDING,
                new_status=announcement.approval_status,
                notes=reason,
                performed_at=announcement.approved_at,
            )
        return announcement

    @staticmethod
    def _clean_reason(reason: Optional[str]) -> Optional[str]:
        reason = (reason or "").strip()
        return reason or None
