from portal.services.announcement.announcement_service import AUTO_APPROVER, AnnouncementService

__all__ = ["AUTO_APPROVER", "AnnouncementService"]
