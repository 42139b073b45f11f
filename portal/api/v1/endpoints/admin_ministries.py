"""Ministry directory administration."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from portal.api import deps
from portal.core.security import Principal
from portal.schemas.ministry import (
    MinistryCreate,
    MinistryResponse,
    MinistrySeedResult,
    MinistryUpdate,
)
from portal.services.ministry import MinistryService

router = APIRouter(prefix="/admin/ministries", tags=["Ministry Directory"])


@router.get("", response_model=List[MinistryResponse])
def list_ministries(
    active_only: bool = Query(default=False),
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> List[MinistryResponse]:
    ministries = deps.raise_for_result(service.list_ministries(active_only=active_only))
    return [MinistryResponse.model_validate(ministry) for ministry in ministries]


@router.post("", response_model=MinistryResponse, status_code=status.HTTP_201_CREATED)
def create_ministry(
    payload: MinistryCreate,
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> MinistryResponse:
    ministry = deps.raise_for_result(service.create_ministry(payload))
    return MinistryResponse.model_validate(ministry)


@router.post("/seed", response_model=MinistrySeedResult)
def seed_ministries(
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> MinistrySeedResult:
    """Load the default parish ministries. Existing names are left alone."""
    return deps.raise_for_result(service.seed_default_ministries())


@router.get("/{ministry_id}", response_model=MinistryResponse)
def get_ministry(
    ministry_id: str,
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> MinistryResponse:
    return MinistryResponse.model_validate(deps.raise_for_result(service.get_ministry(ministry_id)))


@router.put("/{ministry_id}", response_model=MinistryResponse)
def update_ministry(
    ministry_id: str,
    payload: MinistryUpdate,
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> MinistryResponse:
    ministry = deps.raise_for_result(service.update_ministry(ministry_id, payload))
    return MinistryResponse.model_validate(ministry)


@router.delete("/{ministry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ministry(
    ministry_id: str,
    principal: Principal = Depends(deps.require_admin),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> Response:
    deps.raise_for_result(service.delete_ministry(ministry_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
