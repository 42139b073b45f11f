"""Public ministry autocomplete."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from portal.api import deps
from portal.schemas.ministry import MinistrySearchResult
from portal.services.ministry import MinistryService

router = APIRouter(prefix="/ministries", tags=["Ministries"])


@router.get("/search", response_model=List[MinistrySearchResult])
def search_ministries(
    q: Optional[str] = Query(default=None, max_length=200),
    limit: int = Query(default=10, ge=1, le=50),
    service: MinistryService = Depends(deps.get_ministry_service),
) -> List[MinistrySearchResult]:
    return deps.raise_for_result(service.search_ministries(q, limit=limit))
