"""Generic async CRUD helpers shared by the model-specific CRUD classes."""
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """CRUD object with default methods to read, save and delete one record."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Get a record by primary key."""
        return await db.get(self.model, id)

    async def save(self, db: AsyncSession, db_obj: ModelType) -> ModelType:
        """Insert or update a single record and commit."""
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, db_obj: ModelType) -> None:
        """Delete a loaded record and commit."""
        await db.delete(db_obj)
        await db.commit()
