"""
AdoptMe Backend - Pet Service
==============================

What:  CRUD for pets, plus creation with an uploaded image.
Who:   /api/pets route handlers; MockService reuses `pet_to_read`.

`adopted` and `owner_id` are only initialised here (available, no owner);
after creation the adoption workflow owns those columns.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adoptme.database import session_scope
from adoptme.exceptions import (
    AdoptMeError,
    DatabaseError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from adoptme.models.pet import Pet
from adoptme.repositories import PetRepository
from adoptme.schemas.pet import PetCreate, PetRead, PetUpdate
from adoptme.services.file_service import FileService

logger = logging.getLogger(__name__)

INCOMPLETE_VALUES = "Incomplete values"


def pet_to_read(pet: Pet) -> PetRead:
    return PetRead(
        id=pet.id,
        name=pet.name,
        specie=pet.specie,
        birth_date=pet.birth_date,
        adopted=pet.adopted,
        owner=pet.owner_id,
        image=pet.image,
    )


class PetService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        file_service: Optional[FileService] = None,
    ):
        self.session_factory = session_factory
        self.file_service = file_service

    async def list_pets(self) -> List[PetRead]:
        try:
            async with session_scope(self.session_factory) as session:
                pets = await PetRepository(session).list_all()
            return [pet_to_read(p) for p in pets]
        except SQLAlchemyError as e:
            logger.error("Database error listing pets: %s", str(e), exc_info=True)
            raise DatabaseError()

    async def get_pet(self, pet_id: uuid.UUID) -> PetRead:
        try:
            async with session_scope(self.session_factory) as session:
                pet = await PetRepository(session).get_by_id(pet_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching pet %s: %s", pet_id, str(e))
            raise DatabaseError(context={"pet_id": str(pet_id)})

        if pet is None:
            raise NotFoundError(resource="pet", resource_id=str(pet_id))
        return pet_to_read(pet)

    async def create_pet(self, data: PetCreate, image: Optional[str] = None) -> PetRead:
        """
        Create an available pet.

        Raises:
            ValidationError: name, specie or birth_date missing
        """
        if not data.name or not data.specie or data.birth_date is None:
            raise ValidationError(INCOMPLETE_VALUES)

        try:
            async with session_scope(self.session_factory) as session:
                pet = await PetRepository(session).create(
                    name=data.name,
                    specie=data.specie,
                    birth_date=data.birth_date,
                    image=image,
                    adopted=False,
                    owner_id=None,
                )
        except SQLAlchemyError as e:
            logger.error("Database error creating pet: %s", str(e), exc_info=True)
            raise DatabaseError()

        logger.info("Pet created: %s (%s)", pet.id, pet.specie)
        return pet_to_read(pet)

    async def create_pet_with_image(
        self,
        name: Optional[str],
        specie: Optional[str],
        birth_date: Optional[date],
        filename: Optional[str],
        content: Optional[bytes],
        field_name: str = "image",
    ) -> PetRead:
        """
        Store the uploaded image under the pets folder, then create the pet
        referencing it. If the database write fails the stored file is removed.
        """
        data = PetCreate(name=name, specie=specie, birth_date=birth_date)
        if not data.name or not data.specie or data.birth_date is None or content is None:
            raise ValidationError(INCOMPLETE_VALUES)
        if self.file_service is None:
            raise RuntimeError("PetService was built without a FileService")

        _, reference = await self.file_service.validate_and_store(field_name, filename, content)
        try:
            return await self.create_pet(data, image=reference)
        except AdoptMeError:
            await self.file_service.cleanup_file(reference)
            raise

    async def update_pet(self, pet_id: uuid.UUID, data: PetUpdate) -> PetRead:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        try:
            async with session_scope(self.session_factory) as session:
                pets = PetRepository(session)
                pet = await pets.get_by_id(pet_id)
                if pet is None:
                    raise NotFoundError(resource="pet", resource_id=str(pet_id))
                if fields:
                    pet = await pets.update_fields(pet, **fields)
        except AdoptMeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating pet %s: %s", pet_id, str(e), exc_info=True)
            raise DatabaseError(context={"pet_id": str(pet_id)})

        logger.info("Pet updated: %s (%s)", pet_id, ", ".join(sorted(fields)) or "no changes")
        return pet_to_read(pet)

    async def delete_pet(self, pet_id: uuid.UUID) -> None:
        """
        Delete an available pet. Adopted pets stay: their adoption record and
        owner reference them.
        """
        try:
            async with session_scope(self.session_factory) as session:
                pets = PetRepository(session)
                pet = await pets.get_by_id(pet_id)
                if pet is None:
                    raise NotFoundError(resource="pet", resource_id=str(pet_id))
                if pet.adopted:
                    raise PreconditionFailedError(
                        "Pet is already adopted",
                        context={"pet_id": str(pet_id), "operation": "delete"},
                    )
                await pets.delete(pet)
        except AdoptMeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting pet %s: %s", pet_id, str(e), exc_info=True)
            raise DatabaseError(context={"pet_id": str(pet_id)})

        logger.info("Pet deleted: %s", pet_id)
