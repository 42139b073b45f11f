"""
Ministry directory schemas.
"""

from typing import List, Optional

from pydantic import Field, field_validator

from portal.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "MinistryCreate",
    "MinistryUpdate",
    "MinistryResponse",
    "MinistrySearchResult",
    "MinistrySeedResult",
]


def _clean_aliases(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    cleaned: List[str] = []
    seen = set()
    for alias in value:
        alias = " ".join(str(alias).split())
        if alias and alias.lower() not in seen:
            seen.add(alias.lower())
            cleaned.append(alias)
    return cleaned


class MinistryCreate(BaseCreateSchema):
    """Payload for adding a ministry to the directory."""

    name: str = Field(..., min_length=1, max_length=200)
    aliases: List[str] = Field(default_factory=list)
    requires_approval: bool = False
    approval_coordinator: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    active: bool = True

    @field_validator("aliases", mode="before")
    @classmethod
    def split_aliases(cls, v):
        # The admin form sends aliases as a comma-separated string
        if isinstance(v, str):
            return v.split(",")
        return v

    @field_validator("aliases")
    @classmethod
    def dedupe_aliases(cls, v: List[str]) -> List[str]:
        return _clean_aliases(v)


class MinistryUpdate(BaseUpdateSchema):
    """Partial update of a ministry."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    aliases: Optional[List[str]] = None
    requires_approval: Optional[bool] = None
    approval_coordinator: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("aliases", mode="before")
    @classmethod
    def split_aliases(cls, v):
        if isinstance(v, str):
            return v.split(",")
        return v

    @field_validator("aliases")
    @classmethod
    def dedupe_aliases(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_aliases(v)


class MinistryResponse(BaseResponseSchema):
    name: str
    aliases: List[str]
    requires_approval: bool
    approval_coordinator: Optional[str] = None
    description: Optional[str] = None
    active: bool


class MinistrySearchResult(BaseSchema):
    """Autocomplete entry for the public submission form."""

    id: str
    name: str
    description: Optional[str] = None
    requires_approval: bool


class MinistrySeedResult(BaseSchema):
    created: int
    skipped: int
