"""
In-memory index over the ministry directory.

Routing a submission must not scan the directory row by row. The
``MinistryDirectory`` keeps an immutable ``MinistryIndex`` keyed by
normalised name and alias, and rebuilds it only when the table's
fingerprint (row count, latest ``updated_at``) changes.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from portal.core.logging import get_logger
from portal.core.security.permissions import normalise_ministry
from portal.models.ministry import Ministry
from portal.repositories.ministry_repository import MinistryRepository

logger = get_logger(__name__)

Fingerprint = Tuple[int, Optional[datetime]]


@dataclass(frozen=True)
class MinistryEntry:
    """Read-only copy of a ministry row, safe to share between requests."""

    id: str
    name: str
    aliases: Tuple[str, ...]
    requires_approval: bool
    approval_coordinator: Optional[str]
    description: Optional[str]

    @classmethod
    def from_model(cls, ministry: Ministry) -> "MinistryEntry":
        return cls(
            id=ministry.id,
            name=ministry.name,
            aliases=tuple(ministry.aliases or ()),
            requires_approval=bool(ministry.requires_approval),
            approval_coordinator=ministry.approval_coordinator,
            description=ministry.description,
        )


class MinistryIndex:
    """
    Lookup table ``normalised name/alias -> MinistryEntry`` for active ministries.

    Name matches take precedence over alias matches. When two ministries
    claim the same alias, the one whose name sorts first keeps it.
    """

    def __init__(self, entries: Iterable[MinistryEntry], fingerprint: Optional[Fingerprint] = None):
        self.fingerprint = fingerprint
        self._entries: List[MinistryEntry] = sorted(entries, key=lambda e: normalise_ministry(e.name))
        self._by_name: Dict[str, MinistryEntry] = {}
        self._by_alias: Dict[str, MinistryEntry] = {}

        for entry in self._entries:
            self._by_name[normalise_ministry(entry.name)] = entry
        for entry in self._entries:
            for alias in entry.aliases:
                key = normalise_ministry(alias)
                if not key:
                    continue
                claimed = self._by_alias.setdefault(key, entry)
                if claimed is not entry:
                    logger.warning(
                        f"Alias '{alias}' is claimed by both '{claimed.name}' and "
                        f"'{entry.name}'; keeping '{claimed.name}'"
                    )

    @classmethod
    def from_ministries(
        cls,
        ministries: Iterable[Ministry],
        fingerprint: Optional[Fingerprint] = None,
    ) -> "MinistryIndex":
        return cls(
            (MinistryEntry.from_model(m) for m in ministries if m.active),
            fingerprint=fingerprint,
        )

    def resolve(self, text: Optional[str]) -> Optional[MinistryEntry]:
        """Resolve free-text ministry input to a directory entry, or None."""
        key = normalise_ministry(text)
        if not key:
            return None
        return self._by_name.get(key) or self._by_alias.get(key)

    def entries(self) -> List[MinistryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self.resolve(text) is not None


class MinistryDirectory:
    """
    Process-wide cache of the current ``MinistryIndex``.

    ``snapshot`` costs one aggregate query when nothing changed; the
    rebuild happens under a lock so concurrent requests share one index.
    """

    def __init__(self):
        self._index: Optional[MinistryIndex] = None
        self._lock = threading.Lock()

    def snapshot(self, repository: MinistryRepository) -> MinistryIndex:
        fingerprint = repository.fingerprint()
        index = self._index
        if index is not None and index.fingerprint == fingerprint:
            return index

        with self._lock:
            if self._index is None or self._index.fingerprint != fingerprint:
                ministries = repository.list_ministries(active_only=True)
                self._index = MinistryIndex.from_ministries(ministries, fingerprint=fingerprint)
                logger.info(
                    f"Ministry index rebuilt with {len(self._index)} active ministries",
                    extra={"ministry_count": fingerprint[0]},
                )
            return self._index

    def invalidate(self) -> None:
        with self._lock:
            self._index = None


ministry_directory = MinistryDirectory()
