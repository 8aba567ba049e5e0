"""
AdoptMe Backend - Session Service
==================================

What:  Registration, login, current-session lookup and logout.
How:   Passwords are bcrypt-hashed at rest (passlib). A successful login
       returns a signed session token holding the public SessionUser data;
       the route layer puts it in the session cookie.
Who:   /api/sessions route handlers.

Error contract:
    missing fields           → 400 "Incomplete values"
    duplicate email          → 400 "User already exists"
    unknown email on login   → 404 "User doesn't exist"
    wrong password           → 400 "Incorrect password"
    missing/invalid cookie   → 401 "Not authenticated"
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from adoptme.config import Settings
from adoptme.database import session_scope
from adoptme.exceptions import (
    AdoptMeError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from adoptme.models.user import User, UserRole
from adoptme.repositories import UserRepository
from adoptme.schemas.session import LoginRequest, RegisterRequest, SessionUser
from adoptme.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INCOMPLETE_VALUES = "Incomplete values"


def session_user(user: User) -> SessionUser:
    return SessionUser(
        id=user.id,
        name=f"{user.first_name} {user.last_name}",
        email=user.email,
        role=UserRole(user.role),
    )


class SessionService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        pwd_context: CryptContext,
    ):
        self.session_factory = session_factory
        self.settings = settings
        self.pwd_context = pwd_context

    async def register(self, data: RegisterRequest) -> uuid.UUID:
        """Create a `user`-role account and return its id."""
        if not data.first_name or not data.last_name or not data.email or not data.password:
            raise ValidationError(INCOMPLETE_VALUES)

        # bcrypt is CPU-bound; keep it off the event loop
        hashed = await run_in_threadpool(hash_password, data.password, self.pwd_context)

        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                if await users.email_exists(data.email):
                    raise ConflictError("User already exists", context={"email": data.email})
                user = await users.create(
                    first_name=data.first_name,
                    last_name=data.last_name,
                    email=data.email,
                    password=hashed,
                    role=UserRole.USER.value,
                    documents=[],
                    last_connection=None,
                )
        except AdoptMeError:
            raise
        except IntegrityError:
            # Concurrent registration with the same email won
            raise ConflictError("User already exists", context={"email": data.email})
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError()

        logger.info("User registered: %s", user.id)
        return user.id

    async def login(self, data: LoginRequest) -> Tuple[SessionUser, str]:
        """
        Verify credentials, stamp last_connection and issue a session token.

        Returns:
            (session user, signed token)
        """
        if not data.email or not data.password:
            raise ValidationError(INCOMPLETE_VALUES)

        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                user = await users.get_by_email(data.email)
                if user is None:
                    raise NotFoundError(resource="user", message="User doesn't exist")

                valid = await run_in_threadpool(
                    verify_password, data.password, user.password, self.pwd_context
                )
                if not valid:
                    raise ValidationError("Incorrect password", field="password")

                await users.update_fields(user, last_connection=datetime.now(timezone.utc))
                current = session_user(user)
        except AdoptMeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError()

        logger.info("User logged in: %s", current.id)
        return current, create_session_token(current, self.settings)

    def current(self, token: Optional[str]) -> SessionUser:
        if not token:
            raise AuthenticationError()
        return decode_session_token(token, self.settings)

    async def logout(self, token: Optional[str]) -> None:
        """
        End the session. A valid token also stamps last_connection; an absent
        or invalid one is ignored so logout always succeeds.
        """
        if not token:
            return
        try:
            current = decode_session_token(token, self.settings)
        except AuthenticationError:
            logger.debug("Logout with invalid session token ignored")
            return

        try:
            async with session_scope(self.session_factory) as session:
                users = UserRepository(session)
                user = await users.get_by_id(current.id)
                if user is not None:
                    await users.update_fields(user, last_connection=datetime.now(timezone.utc))
        except SQLAlchemyError as e:
            logger.error("Database error during logout: %s", str(e), exc_info=True)
            raise DatabaseError()

        logger.info("User logged out: %s", current.id)
