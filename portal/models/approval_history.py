"""
Approval history entries for the announcement audit trail.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import BaseModel, utcnow

__all__ = ["ApprovalHistory", "HistoryAction"]


class HistoryAction:
    """Actions recorded in the approval history."""
    SUBMITTED = "submitted"
    AUTO_APPROVED = "auto_approved"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalHistory(BaseModel):
    """
    Approval history entry for audit trail.

    Records each action in the approval workflow, including the initial
    submission, for a complete audit trail.
    """

    __tablename__ = "approval_history"

    announcement_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        nullable=False,
        comment="Associated announcement",
    )
    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Action taken (submitted, auto_approved, approved, rejected)",
    )
    previous_status: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="Status before action",
    )
    new_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Status after action",
    )
    performed_by: Mapped[Optional[str]] = mapped_column(
        String(320),
        nullable=True,
        comment="Email of the actor, or a system marker",
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When action was performed",
    )

    __table_args__ = (
        Index("ix_approval_history_announcement", "announcement_id", "performed_at"),
        Index("ix_approval_history_action", "action"),
        {"comment": "Approval action history for audit trail"},
    )
