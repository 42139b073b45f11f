"""
Announcement submission model.

A submission is created by the public intake form. Its workflow columns
(approval_status, approved_by, approved_at, rejection_reason) are only
ever changed by the approval workflow, one conditional update at a time.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel, utcnow

__all__ = ["Announcement", "ApprovalStatus"]


class ApprovalStatus:
    """Approval status values."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class Announcement(TimestampModel):
    """An announcement request submitted through the public form."""

    __tablename__ = "announcements"

    # Submitter
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    # Content
    ministry: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        comment="Ministry text exactly as submitted",
    )
    event_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    event_time: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    promotion_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    platforms: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    announcement_body: Mapped[str] = mapped_column(Text, nullable=False)
    add_to_calendar: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    file_links: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Routing snapshot, fixed at creation
    requires_approval: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the submission had to be approved before processing",
    )
    ministry_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("ministries.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    ministry_name: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        comment="Directory name the ministry text resolved to",
    )
    approval_coordinator: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    needs_editorial_review: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Ministry text did not match the directory",
    )

    # Workflow
    approval_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApprovalStatus.PENDING,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    approved_by: Mapped[Optional[str]] = mapped_column(String(320), nullable=True, index=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_announcements_queue", "approval_status", "submitted_at", "id"),
        CheckConstraint(
            "approval_status IN ('pending', 'approved', 'rejected')",
            name="ck_announcements_status_valid",
        ),
        CheckConstraint(
            "approval_status != 'rejected' OR "
            "(rejection_reason IS NOT NULL AND length(trim(rejection_reason)) > 0)",
            name="ck_announcements_rejection_reason",
        ),
        CheckConstraint(
            "approval_status != 'approved' OR "
            "(approved_by IS NOT NULL AND approved_at IS NOT NULL)",
            name="ck_announcements_approval_data",
        ),
        CheckConstraint(
            "requires_approval OR approval_status != 'pending'",
            name="ck_announcements_pending_gate",
        ),
        {"comment": "Announcement submissions"},
    )

    @property
    def is_pending(self) -> bool:
        return self.approval_status == ApprovalStatus.PENDING

    @property
    def review_ministry(self) -> Optional[str]:
        """Ministry used for approver scoping: the resolved name, else the raw text."""
        return self.ministry_name or self.ministry
