"""
Base repository with standardized CRUD operations and error handling.

Repositories flush but never commit; the owning service decides the
transaction boundary.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.exceptions import ConflictError, NotFoundError, RepositoryError
from portal.core.logging import get_logger
from portal.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Provides CRUD operations and error translation for all domain
    repositories.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add a new entity and flush it so generated values are available.

        Raises:
            ConflictError: If a unique constraint is violated
            RepositoryError: For any other database failure
        """
        try:
            self.db.add(entity)
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"{self.model.__name__} already exists",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create failed: {e}") from e

        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    # ==================== Read Operations ====================

    def find_by_id(self, id: Any) -> Optional[ModelType]:
        """Find entity by primary key."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Lookup failed: {e}") from e

    def get_by_id(self, id: Any) -> ModelType:
        """
        Get entity by primary key.

        Raises:
            NotFoundError: If no row has this id
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise NotFoundError(self.model.__name__, str(id))
        return entity

    # ==================== Write Operations ====================

    def flush(self) -> None:
        """Flush pending changes, translating database errors."""
        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"{self.model.__name__} conflicts with existing data",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Flush failed: {e}") from e

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Delete failed: {e}") from e
