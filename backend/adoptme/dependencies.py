"""
AdoptMe Backend - FastAPI Dependencies
=======================================

What:  Dependency providers that hand route handlers their services, and the
       path-id parser shared by every route.
How:   `create_app()` stores the settings, the session factory, the password
       context and the FileService on `app.state`; the providers below read
       them from the current request and construct the services around them.
"""

import uuid

from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adoptme.config import Settings
from adoptme.exceptions import ValidationError
from adoptme.services import (
    AdoptionService,
    FileService,
    MockService,
    PetService,
    SessionService,
    UserService,
)


def parse_id(raw: str, resource: str) -> uuid.UUID:
    """
    Parse a path identifier.

    Raises:
        ValidationError("Invalid <resource> id") for anything that is not a UUID
    """
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(
            message=f"Invalid {resource} id",
            field=f"{resource}_id",
            context={"value": str(raw)[:64]},
        )


# ── Application State ─────────────────────────────────────────────────────
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


# ── Services ──────────────────────────────────────────────────────────────
def get_adoption_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AdoptionService:
    return AdoptionService(session_factory)


def get_user_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    file_service: FileService = Depends(get_file_service),
) -> UserService:
    return UserService(session_factory, file_service=file_service)


def get_pet_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    file_service: FileService = Depends(get_file_service),
) -> PetService:
    return PetService(session_factory, file_service=file_service)


def get_session_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    pwd_context: CryptContext = Depends(get_password_context),
) -> SessionService:
    return SessionService(session_factory, settings, pwd_context)


def get_mock_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    pwd_context: CryptContext = Depends(get_password_context),
) -> MockService:
    return MockService(session_factory, pwd_context)
