from portal.services.ministry.ministry_directory import (
    MinistryDirectory,
    MinistryEntry,
    MinistryIndex,
    ministry_directory,
)
from portal.services.ministry.ministry_service import MinistryService

__all__ = [
    "MinistryDirectory",
    "MinistryEntry",
    "MinistryIndex",
    "MinistryService",
    "ministry_directory",
]
