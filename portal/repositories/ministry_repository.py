"""
Ministry Repository

Directory lookups, uniqueness checks and the change fingerprint used by
the in-memory ministry index.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.exceptions import RepositoryError
from portal.models.announcement import Announcement
from portal.models.ministry import Ministry
from portal.repositories.base.base_repository import BaseRepository


class MinistryRepository(BaseRepository[Ministry]):
    """Repository for the ministry directory."""

    def __init__(self, session: Session):
        super().__init__(Ministry, session)

    def list_ministries(self, active_only: bool = False) -> List[Ministry]:
        query = select(Ministry)
        if active_only:
            query = query.where(Ministry.active.is_(True))
        query = query.order_by(Ministry.name_key.asc())
        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to list ministries: {e}") from e

    def find_by_name_key(
        self,
        name_key: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Ministry]:
        """Find a ministry by normalised name, optionally ignoring one id."""
        query = select(Ministry).where(Ministry.name_key == name_key)
        if exclude_id:
            query = query.where(Ministry.id != exclude_id)
        try:
            return self.db.scalars(query).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to look up ministry: {e}") from e

    def fingerprint(self) -> Tuple[int, Optional[datetime]]:
        """
        Cheap change detector for the directory.

        Returns:
            (row count, latest updated_at); any insert, update or delete
            changes at least one of the two.
        """
        query = select(func.count(Ministry.id), func.max(Ministry.updated_at))
        try:
            count, latest = self.db.execute(query).one()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to read directory fingerprint: {e}") from e
        return int(count or 0), latest

    def detach_announcements(self, ministry_id: str) -> int:
        """Clear the ministry link on submissions that reference it."""
        try:
            result = self.db.execute(
                update(Announcement)
                .where(Announcement.ministry_id == ministry_id)
                .values(ministry_id=None)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to detach submissions: {e}") from e
        return result.rowcount or 0
