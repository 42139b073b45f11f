"""
Ministry directory model.

Each ministry decides whether its announcements need a coordinator's
approval before the communications team processes them.
"""

from typing import List, Optional

from sqlalchemy import JSON, Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel

__all__ = ["Ministry"]


class Ministry(TimestampModel):
    """A parish ministry that can submit announcements."""

    __tablename__ = "ministries"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name",
    )
    name_key: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        unique=True,
        comment="Normalised name used for case-insensitive matching",
    )
    aliases: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Alternative names submitters use for this ministry",
    )
    requires_approval: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether submissions must be approved by the coordinator",
    )
    approval_coordinator: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Coordinator key or email address",
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Inactive ministries are hidden from intake and routing",
    )

    __table_args__ = (
        Index("ix_ministries_active", "active"),
        {"comment": "Ministry directory"},
    )
