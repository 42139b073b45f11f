"""Public announcement submission endpoint."""

from fastapi import APIRouter, Depends, status

from portal.api import deps
from portal.core.logging import get_logger
from portal.schemas.announcement import AnnouncementCreate, AnnouncementResponse
from portal.services.announcement import AnnouncementService

logger = get_logger(__name__)

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.post(
    "",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_announcement(
    payload: AnnouncementCreate,
    service: AnnouncementService = Depends(deps.get_announcement_service),
) -> AnnouncementResponse:
    """
    Submit an announcement request.

    Submissions for ministries that require approval are queued for the
    ministry's coordinator; all others go straight to the communications
    team.
    """
    announcement = deps.raise_for_result(service.submit(payload))
    logger.info(
        f"Announcement {announcement.id} submitted with status {announcement.approval_status}"
    )
    return AnnouncementResponse.model_validate(announcement)
