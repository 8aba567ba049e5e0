"""
AdoptMe Backend - User Service
===============================

What:  Profile CRUD and document uploads for users.
Who:   /api/users route handlers; SessionService and MockService reuse
       `user_to_read`.

Invariants kept here:
    - email stays unique across users (duplicate → "User already exists")
    - a user who owns pets cannot be deleted, so every adopted pet keeps a
      valid owner and adoption records keep a valid adopter
"""

import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adoptme.database import session_scope
from adoptme.exceptions import (
    AdoptMeError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from adoptme.models.user import User, UserRole
from adoptme.repositories import UserRepository
from adoptme.schemas.user import DocumentRef, UserRead, UserUpdate
from adoptme.services.file_service import FileService

logger = logging.getLogger(__name__)

USER_EXISTS = "User already exists"


def user_to_read(user: User, pets: Optional[List[uuid.UUID]] = None) -> UserRead:
    """
    Build the public view of a user. `pets` must be given for users created
    in the current unit of work, whose ownership collection was never loaded.
    """
    return UserRead(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=UserRole(user.role),
        pets=pets if pets is not None else [p.id for p in user.pets],
        documents=[DocumentRef(**d) for d in user.documents or []],
        last_connection=user.last_connection,
    )


class UserService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        file_service: Optional[FileService] = None,
    ):
        self.session_factory = session_factory
        self.file_service = file_service

    async def list_users(self) -> List[UserRead]:
        try:
            async with session_scope(self.session_factory) as session:
                users = await UserRepository(session).list_all()
                return [user_to_read(u) for u in users]
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError()

    async def get_user(self, user_id: uuid.UUID) -> UserRead:
        try:
            async with session_scope(self.session_factory) as session:
                user = await UserRepository(session).get_by_id(user_id)
                if user is None:
                    raise NotFoundError(resource="user", resource_id=str(user_id))
                return user_to_read(user)
        except AdoptMeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

    async def update_user(self, user_id: uuid.UUID, data: UserUpdate) -> UserRead:
        """
        Apply a partial profile update.

        Raises:
            NotFoundError:  unknown user
            ConflictError:  the new email belongs to another user
        """
        fields = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                user = await users.get_by_id(user_id)
                if user is None:
                    raise NotFoundError(resource="user", resource_id=str(user_id))

                new_email = fields.get("email")
                if new_email and new_email != user.email:
                    other = await users.get_by_email(new_email)
                    if other is not None:
                        raise ConflictError(USER_EXISTS, context={"email": new_email})

                if fields:
                    user = await users.update_fields(user, **fields)
                result = user_to_read(user)
        except AdoptMeError:
            raise
        except IntegrityError:
            raise ConflictError(USER_EXISTS, context={"user_id": str(user_id)})
        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(user_id)})

        logger.info("User updated: %s (%s)", user_id, ", ".join(sorted(fields)) or "no changes")
        return result

    async def delete_user(self, user_id: uuid.UUID) -> None:
        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                user = await users.get_by_id(user_id)
                if user is None:
                    raise NotFoundError(resource="user", resource_id=str(user_id))
                if await users.owns_pets(user_id):
                    raise PreconditionFailedError(
                        "User has adopted pets",
                        context={"user_id": str(user_id)},
                    )
                await users.delete(user)
        except AdoptMeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(user_id)})

        logger.info("User deleted: %s", user_id)

    async def upload_documents(
        self,
        user_id: uuid.UUID,
        files: Sequence[Tuple[Optional[str], bytes]],
        field_name: str = "documents",
    ) -> List[DocumentRef]:
        """
        Store each uploaded file and append {name, reference} entries to the
        user's documents.

        Workflow:
            1. No files → ValidationError("No files uploaded")
            2. Unknown user → NotFoundError (nothing stored)
            3. Store every file; if one fails, remove those already written
            4. Persist the extended documents list; on failure remove files

        Returns:
            The newly added document references
        """
        if not files:
            raise ValidationError("No files uploaded", field=field_name)
        if self.file_service is None:
            raise RuntimeError("UserService was built without a FileService")

        # Existence check first so an unknown user never leaves files behind
        await self.get_user(user_id)

        stored: List[DocumentRef] = []
        try:
            for filename, content in files:
                name, reference = await self.file_service.validate_and_store(
                    field_name, filename, content
                )
                stored.append(DocumentRef(name=name, reference=reference))

            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                user = await users.get_by_id(user_id)
                if user is None:
                    raise NotFoundError(resource="user", resource_id=str(user_id))
                documents = list(user.documents or []) + [d.model_dump() for d in stored]
                await users.update_fields(user, documents=documents)
        except Exception as e:
            for doc in stored:
                await self.file_service.cleanup_file(doc.reference)
            if isinstance(e, AdoptMeError):
                raise
            if isinstance(e, SQLAlchemyError):
                logger.error("Database error saving documents for %s: %s", user_id, str(e))
                raise DatabaseError(context={"user_id": str(user_id)})
            raise

        logger.info("Stored %d document(s) for user %s", len(stored), user_id)
        return stored
