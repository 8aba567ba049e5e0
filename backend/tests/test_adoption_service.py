"""
AdoptMe Backend - Adoption Service Tests
=========================================

What:  AdoptionService against a real (in-memory SQLite) database.
How:   Users and pets are inserted through the conftest factories; the
       resulting state is read back with fresh sessions so assertions see
       what was committed, not what a session cached.

Test Strategy:
    ✅ Successful adoption updates pet, ownership and adoption record together
    ✅ Check order: user before pet before availability
    ✅ Second adoption of the same pet is rejected
    ✅ Losing the conditional update leaves no partial writes
    ✅ Two concurrent adoptions of one pet: exactly one wins (in-memory and
       file-backed SQLite)
    ✅ A failing write rolls back the writes before it
"""

import asyncio
import uuid
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from adoptme.database import (
    build_engine,
    build_session_factory,
    create_all,
    dispose_engine,
    session_scope,
)
from adoptme.exceptions import DatabaseError, NotFoundError, PreconditionFailedError
from adoptme.models import Adoption, Pet, User, user_pets
from adoptme.repositories import AdoptionRepository, PetRepository, UserRepository
from adoptme.schemas.adoption import AdoptionRead
from adoptme.services import AdoptionService


async def _count(session_factory, statement) -> int:
    async with session_scope(session_factory) as session:
        return (await session.execute(statement)).scalar_one()


async def _load_pet(session_factory, pet_id) -> Pet:
    async with session_scope(session_factory) as session:
        return await session.get(Pet, pet_id)


async def _owned_pet_ids(session_factory, user_id):
    async with session_scope(session_factory) as session:
        user = await session.get(User, user_id)
        return [p.id for p in user.pets]


class TestAdoptPet:
    """The adoption workflow and its invariants."""

    @pytest.mark.asyncio
    async def test_adopt_pet_updates_all_three_stores(self, session_factory, make_user, make_pet):
        user = await make_user()
        pet = await make_pet()
        service = AdoptionService(session_factory)

        adoption = await service.adopt_pet(user.id, pet.id)

        assert adoption.owner == user.id
        assert adoption.pet == pet.id

        stored_pet = await _load_pet(session_factory, pet.id)
        assert stored_pet.adopted is True
        assert stored_pet.owner_id == user.id

        assert await _owned_pet_ids(session_factory, user.id) == [pet.id]
        assert await _count(
            session_factory,
            select(func.count()).select_from(Adoption).where(Adoption.pet_id == pet.id),
        ) == 1

    @pytest.mark.asyncio
    async def test_unknown_user_is_reported_before_unknown_pet(self, session_factory):
        service = AdoptionService(session_factory)

        with pytest.raises(NotFoundError) as exc_info:
            await service.adopt_pet(uuid.uuid4(), uuid.uuid4())

        assert exc_info.value.message == "user Not found"
        assert exc_info.value.resource == "user"

    @pytest.mark.asyncio
    async def test_unknown_user_with_existing_pet(self, session_factory, make_pet):
        pet = await make_pet()
        service = AdoptionService(session_factory)

        with pytest.raises(NotFoundError, match="user Not found"):
            await service.adopt_pet(uuid.uuid4(), pet.id)

        assert (await _load_pet(session_factory, pet.id)).adopted is False

    @pytest.mark.asyncio
    async def test_unknown_pet(self, session_factory, make_user):
        user = await make_user()
        service = AdoptionService(session_factory)

        with pytest.raises(NotFoundError) as exc_info:
            await service.adopt_pet(user.id, uuid.uuid4())

        assert exc_info.value.message == "Pet not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_second_adoption_is_rejected(self, session_factory, make_user, make_pet):
        first, second = await make_user(), await make_user()
        pet = await make_pet()
        service = AdoptionService(session_factory)
        await service.adopt_pet(first.id, pet.id)

        with pytest.raises(PreconditionFailedError) as exc_info:
            await service.adopt_pet(second.id, pet.id)

        assert exc_info.value.message == "Pet is already adopted"
        assert exc_info.value.status_code == 400
        stored_pet = await _load_pet(session_factory, pet.id)
        assert stored_pet.owner_id == first.id
        assert await _owned_pet_ids(session_factory, second.id) == []
        assert await _count(session_factory, select(func.count()).select_from(Adoption)) == 1

    @pytest.mark.asyncio
    async def test_same_pair_twice_is_not_idempotent(self, session_factory, make_user, make_pet):
        user = await make_user()
        pet = await make_pet()
        service = AdoptionService(session_factory)
        await service.adopt_pet(user.id, pet.id)

        with pytest.raises(PreconditionFailedError):
            await service.adopt_pet(user.id, pet.id)

        assert await _owned_pet_ids(session_factory, user.id) == [pet.id]

    @pytest.mark.asyncio
    async def test_lost_conditional_update_writes_nothing(self, session_factory, make_user, make_pet):
        """A concurrent adopter flipped the pet between the read and the update."""
        user = await make_user()
        pet = await make_pet()
        service = AdoptionService(session_factory)

        with patch.object(PetRepository, "try_mark_adopted", AsyncMock(return_value=False)):
            with pytest.raises(PreconditionFailedError, match="Pet is already adopted"):
                await service.adopt_pet(user.id, pet.id)

        assert (await _load_pet(session_factory, pet.id)).adopted is False
        assert await _count(session_factory, select(func.count()).select_from(user_pets)) == 0
        assert await _count(session_factory, select(func.count()).select_from(Adoption)) == 0

    @pytest.mark.asyncio
    async def test_failed_record_write_rolls_back_pet_and_ownership(
        self, session_factory, make_user, make_pet
    ):
        user = await make_user()
        pet = await make_pet()
        service = AdoptionService(session_factory)
        failure = OperationalError("INSERT INTO adoptions", {}, Exception("disk I/O error"))

        with patch.object(AdoptionRepository, "create", AsyncMock(side_effect=failure)):
            with pytest.raises(DatabaseError):
                await service.adopt_pet(user.id, pet.id)

        stored_pet = await _load_pet(session_factory, pet.id)
        assert stored_pet.adopted is False
        assert stored_pet.owner_id is None
        assert await _owned_pet_ids(session_factory, user.id) == []


@pytest_asyncio.fixture(params=["memory", "file"])
async def racing_factory(request, app_settings, tmp_path):
    """Session factory over an in-memory or a file-backed SQLite database."""
    if request.param == "memory":
        url = "sqlite+aiosqlite:///:memory:"
    else:
        url = f"sqlite+aiosqlite:///{tmp_path / 'adoptme.db'}"
    engine = build_engine(app_settings.model_copy(update={"database_url": url}))
    await create_all(engine)
    yield build_session_factory(engine)
    await dispose_engine(engine)


async def _seed_two_users_and_a_pet(session_factory):
    async with session_scope(session_factory) as session:
        users = UserRepository(session)
        first, second = [
            await users.create(
                first_name=first_name,
                last_name="Test",
                email=f"{first_name.lower()}@test.com",
                password="not-a-real-hash",
                role="user",
                documents=[],
                last_connection=None,
            )
            for first_name in ("Ada", "Grace")
        ]
        pet = await PetRepository(session).create(
            name="Rex",
            specie="dog",
            birth_date=date(2020, 5, 17),
            image=None,
            adopted=False,
            owner_id=None,
        )
    return first.id, second.id, pet.id


class TestConcurrentAdoption:
    """Two real adoptions of the same pet racing on the event loop."""

    @pytest.mark.asyncio
    async def test_exactly_one_adopter_wins(self, racing_factory):
        first_id, second_id, pet_id = await _seed_two_users_and_a_pet(racing_factory)
        service = AdoptionService(racing_factory)

        results = await asyncio.gather(
            service.adopt_pet(first_id, pet_id),
            service.adopt_pet(second_id, pet_id),
            return_exceptions=True,
        )

        wins = [r for r in results if isinstance(r, AdoptionRead)]
        losses = [r for r in results if isinstance(r, PreconditionFailedError)]
        assert len(wins) == 1, results
        assert len(losses) == 1, results
        assert losses[0].message == "Pet is already adopted"

        winner = wins[0].owner
        stored_pet = await _load_pet(racing_factory, pet_id)
        assert stored_pet.adopted is True
        assert stored_pet.owner_id == winner
        assert await _count(racing_factory, select(func.count()).select_from(Adoption)) == 1
        assert await _count(racing_factory, select(func.count()).select_from(user_pets)) == 1
        assert await _owned_pet_ids(racing_factory, winner) == [pet_id]

    @pytest.mark.asyncio
    async def test_failed_unit_of_work_keeps_concurrent_commit(self, racing_factory):
        """A rollback in one session never undoes what another session wrote."""
        first_id, _, pet_id = await _seed_two_users_and_a_pet(racing_factory)
        service = AdoptionService(racing_factory)

        results = await asyncio.gather(
            service.adopt_pet(first_id, pet_id),
            service.adopt_pet(uuid.uuid4(), pet_id),
            return_exceptions=True,
        )

        assert isinstance(results[0], AdoptionRead)
        assert isinstance(results[1], NotFoundError)
        stored_pet = await _load_pet(racing_factory, pet_id)
        assert (stored_pet.adopted, stored_pet.owner_id) == (True, first_id)
        assert await _owned_pet_ids(racing_factory, first_id) == [pet_id]


class TestTryMarkAdopted:
    """The compare-and-set primitive on the pet store."""

    @pytest.mark.asyncio
    async def test_only_first_call_wins(self, session_factory, make_user, make_pet):
        first, second = await make_user(), await make_user()
        pet = await make_pet()

        async with session_scope(session_factory) as session:
            assert await PetRepository(session).try_mark_adopted(pet.id, first.id) is True
        async with session_scope(session_factory) as session:
            assert await PetRepository(session).try_mark_adopted(pet.id, second.id) is False

        assert (await _load_pet(session_factory, pet.id)).owner_id == first.id

    @pytest.mark.asyncio
    async def test_missing_pet_is_not_marked(self, session_factory, make_user):
        user = await make_user()
        async with session_scope(session_factory) as session:
            assert await PetRepository(session).try_mark_adopted(uuid.uuid4(), user.id) is False


class TestAdoptionQueries:
    @pytest.mark.asyncio
    async def test_list_is_empty_without_adoptions(self, session_factory):
        assert await AdoptionService(session_factory).list_adoptions() == []

    @pytest.mark.asyncio
    async def test_get_unknown_adoption(self, session_factory):
        with pytest.raises(NotFoundError) as exc_info:
            await AdoptionService(session_factory).get_adoption(uuid.uuid4())
        assert exc_info.value.message == "Adoption not found"

    @pytest.mark.asyncio
    async def test_get_and_list_return_created_records(self, session_factory, make_user, make_pet):
        user = await make_user()
        rex, tom = await make_pet("Rex", "dog"), await make_pet("Tom", "cat")
        service = AdoptionService(session_factory)
        first = await service.adopt_pet(user.id, rex.id)
        second = await service.adopt_pet(user.id, tom.id)

        fetched = await service.get_adoption(first.id)
        listed = await service.list_adoptions()

        assert (fetched.id, fetched.owner, fetched.pet) == (first.id, user.id, rex.id)
        assert {a.id for a in listed} == {first.id, second.id}
        assert set(await _owned_pet_ids(session_factory, user.id)) == {rex.id, tom.id}
