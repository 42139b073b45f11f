from portal.repositories.announcement_repository import AnnouncementRepository
from portal.repositories.base import BaseRepository
from portal.repositories.ministry_repository import MinistryRepository

__all__ = [
    "AnnouncementRepository",
    "BaseRepository",
    "MinistryRepository",
]
