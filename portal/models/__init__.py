from portal.models.announcement import Announcement, ApprovalStatus
from portal.models.approval_history import ApprovalHistory, HistoryAction
from portal.models.base import Base, BaseModel, TimestampModel
from portal.models.ministry import Ministry

__all__ = [
    "Announcement",
    "ApprovalHistory",
    "ApprovalStatus",
    "Base",
    "BaseModel",
    "HistoryAction",
    "Ministry",
    "TimestampModel",
]
