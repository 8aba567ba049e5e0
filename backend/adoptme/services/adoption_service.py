"""
AdoptMe Backend - Adoption Service (Workflow Orchestrator)
===========================================================

What:  The adoption workflow: validate user and pet, then record the
       adoption as one atomic change across three stores.
How:   One unit of work per call (`session_scope`). Repositories for users,
       pets and adoptions are built over the same session, so the three
       writes commit or roll back together.
Who:   Called by the /api/adoptions route handlers.

Orchestration Flow (POST /api/adoptions/{uid}/{pid}):
    ┌──────────┐    ┌──────────┐    ┌───────────┐    ┌──────────────────────┐
    │ User     │───▶│ Pet      │───▶│ Available │───▶│ mark pet adopted     │
    │ exists?  │    │ exists?  │    │ ?         │    │ + user owns pet      │
    └──────────┘    └──────────┘    └───────────┘    │ + adoption record    │
       404             404              400          │ (single transaction) │
                                                     └──────────────────────┘

Race Handling:
    The availability check above is only a fast path. The authoritative
    guard is `PetRepository.try_mark_adopted()`, a conditional UPDATE that
    matches only while `adopted` is still false. A request that loses the
    race gets the same "Pet is already adopted" error and its transaction
    is rolled back, so no ownership row or adoption record is left behind.
    The unique constraint on adoptions.pet_id backs this up at the storage
    level.
"""

import logging
import uuid
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adoptme.database import session_scope
from adoptme.exceptions import (
    AdoptMeError,
    DatabaseError,
    NotFoundError,
    PreconditionFailedError,
)
from adoptme.models.adoption import Adoption
from adoptme.repositories import AdoptionRepository, PetRepository, UserRepository
from adoptme.schemas.adoption import AdoptionRead

logger = logging.getLogger(__name__)

ALREADY_ADOPTED = "Pet is already adopted"


def adoption_to_read(adoption: Adoption) -> AdoptionRead:
    return AdoptionRead(
        id=adoption.id,
        owner=adoption.owner_id,
        pet=adoption.pet_id,
        created_at=adoption.created_at,
    )


class AdoptionService:
    """
    Business logic for adoptions.

    Responsibilities:
        - adopt_pet():       the atomic adoption workflow
        - list_adoptions():  every adoption record, newest first
        - get_adoption():    one record by id
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def adopt_pet(self, user_id: uuid.UUID, pet_id: uuid.UUID) -> AdoptionRead:
        """
        Adopt `pet_id` on behalf of `user_id`.

        Checks run in this order and stop at the first failure; none of the
        failing paths write anything:
            1. user exists          else NotFoundError    "user Not found"
            2. pet exists           else NotFoundError    "Pet not found"
            3. pet not yet adopted  else PreconditionFailedError

        Then, in one transaction: mark the pet adopted by the user, append
        it to the user's owned pets, create the Adoption record.

        Returns:
            The created adoption record

        Raises:
            NotFoundError, PreconditionFailedError, DatabaseError
        """
        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                pets = PetRepository(session)
                adoptions = AdoptionRepository(session)

                # ── Step 1: Resolve the adopter ───────────────────────────
                user = await users.get_by_id(user_id)
                if user is None:
                    raise NotFoundError(
                        resource="user",
                        message="user Not found",
                        resource_id=str(user_id),
                    )

                # ── Step 2: Resolve the pet ───────────────────────────────
                pet = await pets.get_by_id(pet_id)
                if pet is None:
                    raise NotFoundError(resource="pet", resource_id=str(pet_id))

                # ── Step 3: Availability fast path ────────────────────────
                if pet.adopted:
                    raise PreconditionFailedError(
                        ALREADY_ADOPTED,
                        context={"pet_id": str(pet_id)},
                    )

                # ── Step 4: Atomic three-way write ────────────────────────
                if not await pets.try_mark_adopted(pet_id, user_id):
                    logger.info("Adoption race lost: pet=%s user=%s", pet_id, user_id)
                    raise PreconditionFailedError(
                        ALREADY_ADOPTED,
                        context={"pet_id": str(pet_id), "race": True},
                    )
                await users.add_owned_pet(user_id, pet_id)
                adoption = await adoptions.create(owner_id=user_id, pet_id=pet_id)

            logger.info("Pet %s adopted by user %s (adoption %s)", pet_id, user_id, adoption.id)
            return adoption_to_read(adoption)

        except AdoptMeError:
            raise
        except IntegrityError as e:
            # A concurrent adoption committed the ownership row or the
            # adoption record first.
            logger.info("Adoption rejected by constraint: pet=%s (%s)", pet_id, type(e).__name__)
            raise PreconditionFailedError(ALREADY_ADOPTED, context={"pet_id": str(pet_id)})
        except SQLAlchemyError as e:
            logger.error("Database error adopting pet %s: %s", pet_id, str(e), exc_info=True)
            raise DatabaseError(context={"pet_id": str(pet_id), "user_id": str(user_id)})

    async def list_adoptions(self) -> List[AdoptionRead]:
        try:
            async with session_scope(self.session_factory) as session:
                records = await AdoptionRepository(session).list_all()
            return [adoption_to_read(a) for a in records]
        except SQLAlchemyError as e:
            logger.error("Database error listing adoptions: %s", str(e), exc_info=True)
            raise DatabaseError()

    async def get_adoption(self, adoption_id: uuid.UUID) -> AdoptionRead:
        try:
            async with session_scope(self.session_factory) as session:
                adoption = await AdoptionRepository(session).get_by_id(adoption_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching adoption %s: %s", adoption_id, str(e))
            raise DatabaseError(context={"adoption_id": str(adoption_id)})

        if adoption is None:
            raise NotFoundError(resource="adoption", resource_id=str(adoption_id))
        return adoption_to_read(adoption)
