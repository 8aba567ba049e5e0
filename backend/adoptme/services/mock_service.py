"""
AdoptMe Backend - Mock Data Service
====================================

What:  Generates realistic fake pets and users with Faker, either returned
       as-is (mockingpets / mockingusers) or persisted (generateData).
Who:   /api/mocks route handlers.

Generated data:
    Pet   name (first name), specie from SPECIES, birth date within the
          past 10 years, adopted=false, empty image
    User  first/last name, `<first>.<last><n>@test.com`, password
          "coder123" bcrypt-hashed, random role, no pets
"""

import logging
import re
from typing import Any, List, Optional, Set, Tuple

from faker import Faker
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from adoptme.database import session_scope
from adoptme.exceptions import DatabaseError, ValidationError
from adoptme.models.user import User, UserRole
from adoptme.repositories import PetRepository, UserRepository
from adoptme.schemas.mock import GeneratedData
from adoptme.schemas.pet import MockPet
from adoptme.schemas.user import MockUser
from adoptme.security import hash_password
from adoptme.services.pet_service import pet_to_read
from adoptme.services.user_service import user_to_read

logger = logging.getLogger(__name__)

SPECIES = ["dog", "cat", "bird", "hamster", "rabbit"]
MOCK_PASSWORD = "coder123"
MOCK_EMAIL_DOMAIN = "test.com"
MAX_GENERATE = 10_000

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def parse_count(value: Any) -> int:
    """
    Parse a generateData count: a non-negative int or a numeric string.

    Raises:
        ValidationError("Parameters must be valid numbers")
    """
    if isinstance(value, bool):
        raise ValidationError("Parameters must be valid numbers")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError("Parameters must be valid numbers")
    if not isinstance(value, int) or value < 0 or value > MAX_GENERATE:
        raise ValidationError("Parameters must be valid numbers")
    return value


class MockService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        pwd_context: CryptContext,
        faker: Optional[Faker] = None,
    ):
        self.session_factory = session_factory
        self.pwd_context = pwd_context
        self.faker = faker or Faker()

    # ── Generation ────────────────────────────────────────────────────────
    def generate_pet(self) -> MockPet:
        return MockPet(
            name=self.faker.first_name(),
            specie=self.faker.random_element(SPECIES),
            birth_date=self.faker.date_between(start_date="-10y", end_date="today"),
            adopted=False,
            image="",
        )

    def generate_pets(self, count: int) -> List[MockPet]:
        return [self.generate_pet() for _ in range(count)]

    def _email_for(self, first_name: str, last_name: str, taken: Set[str]) -> str:
        first = _NON_ALNUM.sub("", first_name.lower()) or "user"
        last = _NON_ALNUM.sub("", last_name.lower()) or "mock"
        while True:
            email = f"{first}.{last}{self.faker.random_int(0, 9999)}@{MOCK_EMAIL_DOMAIN}"
            if email not in taken:
                taken.add(email)
                return email

    async def generate_users(self, count: int, taken: Optional[Set[str]] = None) -> List[MockUser]:
        """
        Generate `count` users. Emails are unique within the batch and never
        collide with anything in `taken`.
        """
        if count == 0:
            return []
        taken = set(taken or ())
        # One hash per batch: every mock user shares the same password
        hashed = await run_in_threadpool(hash_password, MOCK_PASSWORD, self.pwd_context)

        users = []
        for _ in range(count):
            first_name = self.faker.first_name()
            last_name = self.faker.last_name()
            users.append(
                MockUser(
                    first_name=first_name,
                    last_name=last_name,
                    email=self._email_for(first_name, last_name, taken),
                    password=hashed,
                    role=self.faker.random_element([UserRole.USER, UserRole.ADMIN]),
                    pets=[],
                )
            )
        return users

    # ── Persistence ───────────────────────────────────────────────────────
    async def generate_data(self, users: Any, pets: Any) -> Tuple[GeneratedData, str]:
        """
        Generate and insert `users` users and `pets` pets in one transaction.

        Returns:
            (inserted data, summary message)

        Raises:
            ValidationError: a count is missing or not a non-negative integer
        """
        if users is None or pets is None:
            raise ValidationError("users and pets parameters are required")
        users_count = parse_count(users)
        pets_count = parse_count(pets)

        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(select(User.email))
                existing = set(result.scalars().all())

                mock_users = await self.generate_users(users_count, taken=existing)
                mock_pets = self.generate_pets(pets_count)

                user_repo = UserRepository(session)
                pet_repo = PetRepository(session)
                inserted_users = []
                for mock in mock_users:
                    user = await user_repo.create(
                        first_name=mock.first_name,
                        last_name=mock.last_name,
                        email=mock.email,
                        password=mock.password,
                        role=mock.role.value,
                        documents=[],
                        last_connection=None,
                    )
                    inserted_users.append(user_to_read(user, pets=[]))

                inserted_pets = []
                for mock in mock_pets:
                    pet = await pet_repo.create(
                        name=mock.name,
                        specie=mock.specie,
                        birth_date=mock.birth_date,
                        image=mock.image,
                        adopted=False,
                        owner_id=None,
                    )
                    inserted_pets.append(pet_to_read(pet))
        except SQLAlchemyError as e:
            logger.error("Database error inserting mock data: %s", str(e), exc_info=True)
            raise DatabaseError()

        message = f"Inserted {len(inserted_users)} users and {len(inserted_pets)} pets"
        logger.info(message)
        return GeneratedData(users=inserted_users, pets=inserted_pets), message
