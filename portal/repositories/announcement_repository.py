"""
Announcement Repository

Submission persistence, the approval queue and compare-and-set status
transitions with history.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.exceptions import (
    InvalidStateTransitionError,
    NotFoundError,
    RepositoryError,
)
from portal.models.announcement import Announcement, ApprovalStatus
from portal.models.approval_history import ApprovalHistory
from portal.models.base import utcnow
from portal.repositories.base.base_repository import BaseRepository


class AnnouncementRepository(BaseRepository[Announcement]):
    """
    Repository for announcement submissions.

    Status changes never read-modify-write the ORM object. Each one is a
    single ``UPDATE ... WHERE id = :id AND approval_status = 'pending'`` so
    that concurrent reviewers cannot both win.
    """

    def __init__(self, session: Session):
        super().__init__(Announcement, session)

    # ==================== Queue ====================

    def list_by_status(
        self,
        status: str,
        requires_approval: Optional[bool] = None,
    ) -> List[Announcement]:
        """
        List submissions in a status, oldest submission first.

        Args:
            status: One of pending / approved / rejected
            requires_approval: Optional filter on the routing snapshot

        Returns:
            Submissions ordered by submitted_at, then id
        """
        query = select(Announcement).where(Announcement.approval_status == status)
        if requires_approval is not None:
            query = query.where(Announcement.requires_approval.is_(requires_approval))
        query = query.order_by(Announcement.submitted_at.asc(), Announcement.id.asc())

        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to list submissions: {e}") from e

    # ==================== Transitions ====================

    def approve(self, announcement_id: str, approved_by: str) -> Announcement:
        """
        Move a pending submission to approved.

        Raises:
            NotFoundError: If the submission does not exist
            InvalidStateTransitionError: If it is no longer pending
        """
        return self._transition(
            announcement_id,
            action="approve",
            values={
                "approval_status": ApprovalStatus.APPROVED,
                "approved_by": approved_by,
                "approved_at": utcnow(),
            },
        )

    def reject(self, announcement_id: str, rejected_by: str, reason: str) -> Announcement:
        """
        Move a pending submission to rejected.

        Raises:
            NotFoundError: If the submission does not exist
            InvalidStateTransitionError: If it is no longer pending
        """
        return self._transition(
            announcement_id,
            action="reject",
            values={
                "approval_status": ApprovalStatus.REJECTED,
                "approved_by": rejected_by,
                "approved_at": utcnow(),
                "rejection_reason": reason,
            },
        )

    def _transition(
        self,
        announcement_id: str,
        action: str,
        values: Dict[str, Any],
    ) -> Announcement:
        statement = (
            update(Announcement)
            .where(
                Announcement.id == announcement_id,
                Announcement.approval_status == ApprovalStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(statement)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to {action} submission: {e}") from e

        if result.rowcount != 1:
            current = self.get_status(announcement_id)
            if current is None:
                raise NotFoundError("Announcement", announcement_id)
            raise InvalidStateTransitionError(announcement_id, current, action)

        try:
            return self.db.get(Announcement, announcement_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to reload submission: {e}") from e

    def get_status(self, announcement_id: str) -> Optional[str]:
        """Current status straight from the table, bypassing the identity map."""
        try:
            return self.db.scalar(
                select(Announcement.approval_status).where(Announcement.id == announcement_id)
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to read submission status: {e}") from e

    # ==================== History ====================

    def record_history(
        self,
        announcement_id: str,
        action: str,
        performed_by: Optional[str],
        previous_status: Optional[str],
        new_status: str,
        notes: Optional[str] = None,
        performed_at: Optional[datetime] = None,
    ) -> ApprovalHistory:
        """Record approval history entry."""
        history = ApprovalHistory(
            announcement_id=announcement_id,
            action=action,
            performed_by=performed_by,
            previous_status=previous_status,
            new_status=new_status,
            notes=notes,
            performed_at=performed_at or utcnow(),
        )
        self.db.add(history)
        self.flush()
        return history

    def get_history(self, announcement_id: str, limit: int = 50) -> List[ApprovalHistory]:
        """History entries for a submission, newest first."""
        query = (
            select(ApprovalHistory)
            .where(ApprovalHistory.announcement_id == announcement_id)
            .order_by(ApprovalHistory.performed_at.desc())
            .limit(limit)
        )
        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load approval history: {e}") from e
