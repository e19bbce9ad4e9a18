"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, List, Type
from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.

    Models handled here use an integer ``id`` primary key. Writes are issued
    as single statements and report the number of affected rows.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        """Get entity by ID"""
        return self.db.get(self.model, entity_id)

    def get_all(self) -> List[ModelType]:
        """Get all entities ordered by ID"""
        return list(self.db.scalars(select(self.model).order_by(self.model.id)))

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete_by_id(self, entity_id: int) -> int:
        """Delete entity by ID, returns the number of deleted rows"""
        result = self.db.execute(
            delete(self.model)
            .where(self.model.id == entity_id)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def exists(self, entity_id: int) -> bool:
        """Check if entity exists"""
        return (
            self.db.scalar(select(self.model.id).where(self.model.id == entity_id))
            is not None
        )
