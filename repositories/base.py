"""
Base repository for the data access layer.
Services talk to repositories; repositories own the SQLAlchemy queries.
"""

from typing import Generic, TypeVar, Optional, List, Tuple, Type
from uuid import UUID
from sqlalchemy.orm import Query, Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Common persistence operations shared by the mess repositories.

    Subclasses set ``id_field`` to the model's primary key column.
    Writes commit immediately; callers that need several writes in one
    transaction work on the session directly and commit once.
    """

    id_field: str = ""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by ID.

        Args:
            entity_id: Entity UUID

        Returns:
            Entity or None if not found
        """
        if not self.id_field:
            raise NotImplementedError(
                f"{self.__class__.__name__} must set id_field or override get_by_id()"
            )
        column = getattr(self.model, self.id_field)
        return self.db.query(self.model).filter(column == entity_id).first()

    def create(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Commit pending changes on an attached entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Delete entity by ID; False when it does not exist"""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True

    @staticmethod
    def page(query: Query, skip: int, limit: int, *order_by) -> Tuple[List[ModelType], int]:
        """Return one page of ``query`` and the unpaged row count"""
        total = query.count()
        items = query.order_by(*order_by).offset(skip).limit(limit).all()
        return items, total
