"""
Base repository with standardized CRUD operations and error handling.

Provides the foundation for all domain repositories.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_portal.core.exceptions import (
    EntityAlreadyExistsError,
    RepositoryError,
)
from complaint_portal.core.logging import get_logger
from complaint_portal.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user search text matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Write methods take ``commit``: pass ``False`` inside a service
    transaction so several writes land in one commit.
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

    def _finish(self, commit: bool, entity: Optional[ModelType] = None) -> None:
        if commit:
            self.db.commit()
            if entity is not None:
                self.db.refresh(entity)
        else:
            self.db.flush()

    # ==================== Create Operations ====================

    def create(self, entity: ModelType, commit: bool = True) -> ModelType:
        """
        Persist a new entity.

        Raises:
            EntityAlreadyExistsError: If a unique constraint is violated
            RepositoryError: For any other database failure
        """
        try:
            self.db.add(entity)
            self._finish(commit, entity)
            logger.info(f"Created {self.model.__name__} with id: {entity.id}")
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise EntityAlreadyExistsError(
                f"{self.model.__name__} already exists"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Create failed: {str(e)}") from e

    def create_many(self, entities: List[ModelType], commit: bool = True) -> List[ModelType]:
        """Persist several entities in one flush."""
        if not entities:
            return []
        try:
            self.db.add_all(entities)
            self._finish(commit)
            logger.info(f"Bulk created {len(entities)} {self.model.__name__} entities")
            return entities
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Bulk create failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """Find entity by ID, or None."""
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[List[str]] = None,
    ) -> List[ModelType]:
        """
        Find entities matching equality criteria.

        Args:
            criteria: Filter criteria as column-value pairs; list values match any
            order_by: Column names to order by (prefix with - for desc)
        """
        try:
            query = self.db.query(self.model)
            for key, value in criteria.items():
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple, set)):
                    query = query.filter(column.in_(list(value)))
                else:
                    query = query.filter(column == value)

            for field in order_by or []:
                if field.startswith("-"):
                    query = query.order_by(getattr(self.model, field[1:]).desc())
                else:
                    query = query.order_by(getattr(self.model, field).asc())

            return query.all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by criteria failed: {str(e)}") from e

    def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        try:
            query = self.db.query(self.model)
            for key, value in (criteria or {}).items():
                query = query.filter(getattr(self.model, key) == value)
            return query.count()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count failed: {str(e)}") from e

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any], commit: bool = True) -> ModelType:
        """Apply column values to an entity and persist."""
        try:
            for key, value in data.items():
                if not hasattr(entity, key):
                    raise AttributeError(f"{self.model.__name__} has no field {key}")
                setattr(entity, key, value)
            self._finish(commit, entity)
            logger.info(f"Updated {self.model.__name__} with id: {entity.id}")
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Update failed: {str(e)}") from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType, commit: bool = True) -> None:
        try:
            self.db.delete(entity)
            self._finish(commit)
            logger.info(f"Deleted {self.model.__name__} with id: {entity.id}")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Delete failed: {str(e)}") from e
