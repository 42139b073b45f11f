"""
Ministry directory service.

Handles:
- Directory listing and lookup for administrators
- Create, update and delete with name uniqueness
- Idempotent seeding of the parish's default ministries
- Public autocomplete search over active ministries
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from portal.config import Settings, settings as default_settings
from portal.core.exceptions import ConflictError
from portal.core.security.permissions import normalise_ministry
from portal.models.ministry import Ministry
from portal.repositories.ministry_repository import MinistryRepository
from portal.schemas.ministry import (
    MinistryCreate,
    MinistrySearchResult,
    MinistrySeedResult,
    MinistryUpdate,
)
from portal.services.base import BaseService, ServiceResult
from portal.services.ministry.default_ministries import DEFAULT_MINISTRIES
from portal.services.ministry.ministry_directory import (
    MinistryDirectory,
    ministry_directory,
)

DEFAULT_SEARCH_LIMIT = 10


class MinistryService(BaseService[MinistryRepository]):
    """
    Service for the ministry directory.

    Every write commits its own transaction and drops the cached routing
    index so the next submission sees the change.
    """

    def __init__(
        self,
        repository: MinistryRepository,
        db_session: Session,
        directory: Optional[MinistryDirectory] = None,
        config: Optional[Settings] = None,
    ):
        super().__init__(repository, db_session)
        self.directory = directory or ministry_directory
        self.config = config or default_settings

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_ministries(self, active_only: bool = False) -> ServiceResult[List[Ministry]]:
        operation = "list ministries"
        try:
            ministries = self.repository.list_ministries(active_only=active_only)
            return ServiceResult.success(ministries, metadata={"count": len(ministries)})
        except Exception as e:
            return self._handle_exception(e, operation)

    def get_ministry(self, ministry_id: str) -> ServiceResult[Ministry]:
        operation = "get ministry"
        try:
            return ServiceResult.success(self.repository.get_by_id(ministry_id))
        except Exception as e:
            return self._handle_exception(e, operation, ministry_id)

    def search_ministries(
        self,
        query: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> ServiceResult[List[MinistrySearchResult]]:
        """
        Autocomplete over active ministries.

        Matches the query against name, aliases and description. Names that
        start with the query rank first, the rest alphabetically. An empty
        query returns every active ministry up to ``limit``.
        """
        operation = "search ministries"
        try:
            index = self.directory.snapshot(self.repository)
            needle = normalise_ministry(query)
            entries = index.entries()

            if needle:
                entries = [
                    entry
                    for entry in entries
                    if needle in entry.name.lower()
                    or needle in (entry.description or "").lower()
                    or any(needle in alias.lower() for alias in entry.aliases)
                ]
                entries.sort(
                    key=lambda entry: (
                        not entry.name.lower().startswith(needle),
                        entry.name.lower(),
                    )
                )

            results = [
                MinistrySearchResult(
                    id=entry.id,
                    name=entry.name,
                    description=entry.description,
                    requires_approval=entry.requires_approval,
                )
                for entry in entries[: max(limit, 0)]
            ]
            return ServiceResult.success(results, metadata={"query": query or ""})
        except Exception as e:
            return self._handle_exception(e, operation, query)

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def create_ministry(self, payload: MinistryCreate) -> ServiceResult[Ministry]:
        operation = "create ministry"
        self._logger.info(f"{operation}: name={payload.name!r}")
        try:
            with self.transaction():
                name_key = self._ensure_unique_name(payload.name)
                ministry = Ministry(
                    name=" ".join(payload.name.split()),
                    name_key=name_key,
                    aliases=list(payload.aliases),
                    requires_approval=payload.requires_approval,
                    approval_coordinator=self._coordinator_for(
                        payload.requires_approval, payload.approval_coordinator
                    ),
                    description=payload.description,
                    active=payload.active,
                )
                self.repository.create(ministry)
            self.directory.invalidate()
            return ServiceResult.success(ministry, message="Ministry created")
        except Exception as e:
            return self._handle_exception(e, operation, payload.name)

    def update_ministry(
        self,
        ministry_id: str,
        payload: MinistryUpdate,
    ) -> ServiceResult[Ministry]:
        operation = "update ministry"
        self._logger.info(f"{operation}: id={ministry_id}")
        try:
            with self.transaction():
                ministry = self.repository.get_by_id(ministry_id)
                changes = payload.model_dump(exclude_unset=True)

                if changes.get("name") is not None:
                    ministry.name_key = self._ensure_unique_name(
                        changes["name"], exclude_id=ministry.id
                    )
                    ministry.name = " ".join(changes["name"].split())
                for field in ("aliases", "requires_approval", "description", "active"):
                    if changes.get(field) is not None:
                        setattr(ministry, field, changes[field])
                if "approval_coordinator" in changes or "requires_approval" in changes:
                    ministry.approval_coordinator = self._coordinator_for(
                        ministry.requires_approval,
                        changes.get("approval_coordinator", ministry.approval_coordinator),
                    )
                self.repository.flush()
            self.directory.invalidate()
            return ServiceResult.success(ministry, message="Ministry updated")
        except Exception as e:
            return self._handle_exception(e, operation, ministry_id)

    def delete_ministry(self, ministry_id: str) -> ServiceResult[None]:
        """
        Remove a ministry from the directory.

        Existing submissions keep their routing snapshot; only the foreign
        key to the deleted row is cleared.
        """
        operation = "delete ministry"
        self._logger.info(f"{operation}: id={ministry_id}")
        try:
            with self.transaction():
                ministry = self.repository.get_by_id(ministry_id)
                detached = self.repository.detach_announcements(ministry.id)
                self.repository.delete(ministry)
            self.directory.invalidate()
            return ServiceResult.success(
                None,
                message="Ministry deleted",
                metadata={"detached_submissions": detached},
            )
        except Exception as e:
            return self._handle_exception(e, operation, ministry_id)

    def seed_default_ministries(self) -> ServiceResult[MinistrySeedResult]:
        """Insert the default ministries that are not in the directory yet."""
        operation = "seed default ministries"
        try:
            created = skipped = 0
            with self.transaction():
                for item in DEFAULT_MINISTRIES:
                    name_key = normalise_ministry(item["name"])
                    if self.repository.find_by_name_key(name_key) is not None:
                        skipped += 1
                        continue
                    requires_approval = item.get("requires_approval", False)
                    self.repository.create(
                        Ministry(
                            name=item["name"],
                            name_key=name_key,
                            aliases=list(item.get("aliases", [])),
                            requires_approval=requires_approval,
                            approval_coordinator=self._coordinator_for(
                                requires_approval, item.get("approval_coordinator")
                            ),
                            description=item.get("description"),
                            active=True,
                        )
                    )
                    created += 1
            if created:
                self.directory.invalidate()
            self._logger.info(f"Seeded {created} ministries, {skipped} already present")
            return ServiceResult.success(
                MinistrySeedResult(created=created, skipped=skipped),
                message=f"Seeded {created} ministries",
            )
        except Exception as e:
            return self._handle_exception(e, operation)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name_key = normalise_ministry(name)
        existing = self.repository.find_by_name_key(name_key, exclude_id=exclude_id)
        if existing is not None:
            raise ConflictError(
                f"A ministry named '{existing.name}' already exists",
                details={"id": existing.id, "name": existing.name},
            )
        return name_key

    def _coordinator_for(self, requires_approval: bool, coordinator: Optional[str]) -> Optional[str]:
        coordinator = (coordinator or "").strip() or None
        if requires_approval and coordinator is None:
            return self.config.DEFAULT_APPROVAL_COORDINATOR
        return coordinator


__all__ = ["MinistryService"]
