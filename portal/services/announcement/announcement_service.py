"""
Announcement intake service.

Routes each public submission through the ministry directory and stores
it in its initial state: pending for ministries that need a coordinator's
approval, approved for everything else.
"""

from typing import Optional

from sqlalchemy.orm import Session

from portal.models.announcement import Announcement, ApprovalStatus
from portal.models.approval_history import HistoryAction
from portal.models.base import utcnow
from portal.repositories.announcement_repository import AnnouncementRepository
from portal.repositories.ministry_repository import MinistryRepository
from portal.schemas.announcement import AnnouncementCreate
from portal.services.approval.approval_router import RoutingDecision, route
from portal.services.base import BaseService, ServiceResult
from portal.services.ministry.ministry_directory import (
    MinistryDirectory,
    MinistryEntry,
    ministry_directory,
)
from portal.services.notification import NotificationDispatcher, NotificationEvent

AUTO_APPROVER = "system:auto-approval"


class AnnouncementService(BaseService[AnnouncementRepository]):
    """Public submission intake."""

    def __init__(
        self,
        repository: AnnouncementRepository,
        db_session: Session,
        ministry_repository: MinistryRepository,
        dispatcher: NotificationDispatcher,
        directory: Optional[MinistryDirectory] = None,
    ):
        super().__init__(repository, db_session)
        self.ministry_repository = ministry_repository
        self.dispatcher = dispatcher
        self.directory = directory or ministry_directory

    def submit(self, payload: AnnouncementCreate) -> ServiceResult[Announcement]:
        """
        Create a submission from the public form.

        The routing decision is copied onto the record and never
        recomputed, so later directory edits do not move existing
        submissions between queues.

        Returns:
            ServiceResult containing the stored Announcement
        """
        operation = "submit announcement"
        decision = route(payload.ministry, self._lookup_ministry)
        self._logger.info(
            f"{operation}: ministry={payload.ministry!r}, "
            f"requires_approval={decision.requires_approval}, "
            f"needs_editorial_review={decision.needs_editorial_review}"
        )

        try:
            with self.transaction():
                announcement = self.repository.create(self._build(payload, decision))
                if announcement.is_pending:
                    self.repository.record_history(
                        announcement_id=announcement.id,
                        action=HistoryAction.SUBMITTED,
                        performed_by=announcement.email,
                        previous_status=None,
                        new_status=ApprovalStatus.PENDING,
                        performed_at=announcement.submitted_at,
                    )
                else:
                    self.repository.record_history(
                        announcement_id=announcement.id,
                        action=HistoryAction.AUTO_APPROVED,
                        performed_by=AUTO_APPROVER,
                        previous_status=None,
                        new_status=ApprovalStatus.APPROVED,
                        notes="Ministry does not require approval",
                        performed_at=announcement.submitted_at,
                    )
        except Exception as e:
            return self._handle_exception(e, operation, payload.email)

        self.dispatcher.dispatch(NotificationEvent.RECEIVED, announcement)
        if announcement.is_pending:
            self.dispatcher.dispatch(NotificationEvent.PENDING_REVIEW, announcement)

        message = (
            "Announcement submitted for approval"
            if announcement.is_pending
            else "Announcement submitted"
        )
        return ServiceResult.success(announcement, message=message)

    def get_announcement(self, announcement_id: str) -> ServiceResult[Announcement]:
        operation = "get announcement"
        try:
            return ServiceResult.success(self.repository.get_by_id(announcement_id))
        except Exception as e:
            return self._handle_exception(e, operation, announcement_id)

    def _lookup_ministry(self, name: str) -> Optional[MinistryEntry]:
        try:
            return self.directory.snapshot(self.ministry_repository).resolve(name)
        except Exception:
            # A failed query aborts the transaction on PostgreSQL; the insert
            # that follows needs a clean session.
            self.db.rollback()
            raise

    @staticmethod
    def _build(payload: AnnouncementCreate, decision: RoutingDecision) -> Announcement:
        submitted_at = utcnow()
        announcement = Announcement(
            name=payload.name,
            email=payload.email.lower(),
            ministry=payload.ministry,
            event_date=payload.event_date,
            event_time=payload.event_time,
            promotion_start=payload.promotion_start,
            platforms=[platform.value for platform in payload.platforms],
            announcement_body=payload.announcement_body,
            add_to_calendar=payload.add_to_calendar,
            file_links=[str(link) for link in payload.file_links],
            requires_approval=decision.requires_approval,
            ministry_id=decision.ministry_id,
            ministry_name=decision.ministry_name,
            approval_coordinator=decision.approval_coordinator,
            needs_editorial_review=decision.needs_editorial_review,
            submitted_at=submitted_at,
        )
        if decision.requires_approval:
            announcement.approval_status = ApprovalStatus.PENDING
        else:
            announcement.approval_status = ApprovalStatus.APPROVED
            announcement.approved_by = AUTO_APPROVER
            announcement.approved_at = submitted_at
        return announcement
