"""Pet store: persistence for Pet records, including the adoption compare-and-set."""

import logging
import uuid

from sqlalchemy import update

from adoptme.models.pet import Pet
from adoptme.repositories.base import MutableRepository

logger = logging.getLogger(__name__)


class PetRepository(MutableRepository[Pet]):
    model = Pet

    async def try_mark_adopted(self, pet_id: uuid.UUID, owner_id: uuid.UUID) -> bool:
        """
        Atomically flip a pet from available to adopted by `owner_id`.

        Issues a single conditional statement:

            UPDATE pets SET adopted = true, owner_id = :owner
            WHERE id = :pet AND adopted = false

        Returns True when this call performed the transition, False when the
        pet was already adopted (or vanished) by the time the row was
        written. Two concurrent adoptions of the same pet therefore cannot
        both succeed.
        """
        result = await self.session.execute(
            update(Pet)
            .where(Pet.id == pet_id, Pet.adopted.is_(False))
            .values(adopted=True, owner_id=owner_id)
            .execution_options(synchronize_session=False)
        )
        marked = result.rowcount == 1
        logger.debug("try_mark_adopted pet=%s owner=%s -> %s", pet_id, owner_id, marked)
        return marked
