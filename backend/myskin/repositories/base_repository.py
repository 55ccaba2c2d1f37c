import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Common CRUD operations for a single SQLAlchemy model.

    Write methods commit, refresh and return the row. On database errors they
    roll back, log with context and return None/False so controllers can
    answer with a 500 instead of leaking a half-applied transaction.
    """

    model: Type[ModelT]

    def __init__(self, db: Session):
        """
        Initialize the repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def get_by_id(self, entity_id: Any) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def list_all(self) -> List[ModelT]:
        return self.db.query(self.model).order_by(self.model.id.desc()).all()  # type: ignore[attr-defined]

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, entity: ModelT) -> Optional[ModelT]:
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Error creating {self.entity_name}",
                extra={"context": {"error": str(e)}},
                exc_info=True,
            )
            return None

    def update(self, entity_id: Any, data: Dict[str, Any]) -> Optional[ModelT]:
        """
        Update a row.

        Args:
            entity_id: Primary key of the row to update
            data: Dictionary of fields to update (unknown keys are ignored)

        Returns:
            Updated row or None if not found or error
        """
        try:
            entity = self.get_by_id(entity_id)
            if entity is None:
                return None

            for key, value in data.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Error updating {self.entity_name}",
                extra={"context": {"entity_id": entity_id, "error": str(e)}},
                exc_info=True,
            )
            return None

    def delete(self, entity_id: Any) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if deleted, False if not found or error
        """
        try:
            entity = self.get_by_id(entity_id)
            if entity is None:
                return False
            self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Error deleting {self.entity_name}",
                extra={"context": {"entity_id": entity_id, "error": str(e)}},
                exc_info=True,
            )
            return False


def like_pattern(term: str) -> str:
    """Build a case-insensitive substring pattern, escaping LIKE wildcards."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
