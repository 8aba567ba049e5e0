"""
Generic persistence operations shared by the AdoptMe stores.

Each repository is bound to one AsyncSession for the lifetime of a unit of
work (see `adoptme.database.session_scope`); it never commits. Flushing
assigns primary keys and surfaces constraint violations early, while the
surrounding scope decides whether the transaction commits.
"""

import uuid
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adoptme.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Find-by-id / list / create for one model class.

    Subclasses set `model` and add entity-specific queries. Append-only
    stores derive from this class directly; stores whose rows change after
    creation derive from MutableRepository.
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return await self.session.get(self.model, entity_id)

    async def list_all(self) -> List[ModelT]:
        result = await self.session.execute(
            select(self.model).order_by(self.model.created_at)
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> ModelT:
        instance = self.model(**fields)
        self.session.add(instance)
        await self.session.flush()
        return instance


class MutableRepository(BaseRepository[ModelT]):
    """Adds in-place updates and deletion."""

    async def update_fields(self, instance: ModelT, **fields: Any) -> ModelT:
        """Apply the given column values to a loaded instance and flush."""
        for name, value in fields.items():
            setattr(instance, name, value)
        await self.session.flush()
        return instance

    async def delete(self, instance: ModelT) -> None:
        await self.session.delete(instance)
        await self.session.flush()
