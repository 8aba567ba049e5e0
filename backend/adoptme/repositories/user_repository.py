"""Identity store: persistence for User records and pet ownership."""

import uuid
from typing import Optional

from sqlalchemy import exists, insert, select

from adoptme.models.user import User, user_pets
from adoptme.repositories.base import MutableRepository


class UserRepository(MutableRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(select(exists().where(User.email == email)))
        return bool(result.scalar())

    async def add_owned_pet(self, user_id: uuid.UUID, pet_id: uuid.UUID) -> None:
        """Append a pet to the user's owned-pets collection."""
        await self.session.execute(
            insert(user_pets).values(user_id=user_id, pet_id=pet_id)
        )

    async def owns_pets(self, user_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            select(exists().where(user_pets.c.user_id == user_id))
        )
        return bool(result.scalar())
