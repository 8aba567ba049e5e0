"""Adoption record store: create and read only; records are immutable."""

from typing import List

from sqlalchemy import select

from adoptme.models.adoption import Adoption
from adoptme.repositories.base import BaseRepository


class AdoptionRepository(BaseRepository[Adoption]):
    """No update or delete: adoption records are never changed once written."""

    model = Adoption

    async def list_all(self) -> List[Adoption]:
        result = await self.session.execute(
            select(Adoption).order_by(Adoption.created_at.desc())
        )
        return list(result.scalars().all())
