"""
AdoptMe Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own application from `create_app()` over a fresh
       in-memory SQLite database (aiosqlite + StaticPool) and a temporary
       upload root. ASGITransport does not run the lifespan, so the app
       fixture creates the tables itself.

Fixture Hierarchy (all function-scoped):
    app_settings ─▶ app ─┬─▶ client          httpx AsyncClient bound to the app
                         └─▶ session_factory ─┬─▶ make_user   insert a user
                                              └─▶ make_pet    insert a pet
"""

import os
import re
import tempfile
from datetime import date
from typing import Optional

# Environment overrides BEFORE any adoptme import: the module-level settings
# and app are built from these.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_ROOT"] = tempfile.mkdtemp(prefix="adoptme_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adoptme.config import Settings
from adoptme.database import create_all, dispose_engine, session_scope
from adoptme.main import create_app
from adoptme.models import Pet, User
from adoptme.security import hash_password

TEST_PASSWORD = "password123"


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        upload_root=str(tmp_path / "public"),
        jwt_secret="test-secret-not-for-production",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(app_settings):
    application = create_app(app_settings)
    await create_all(application.state.engine)
    yield application
    await dispose_engine(application.state.engine)


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient routed straight to the ASGI app.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def session_factory(app):
    return app.state.session_factory


@pytest.fixture
def pwd_context(app):
    """The bcrypt context create_app() built from app_settings (4 rounds)."""
    return app.state.pwd_context


@pytest.fixture
def make_user(session_factory, pwd_context):
    """Insert a user directly through the ORM; returns the User row."""
    counter = {"n": 0}

    async def _make_user(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        role: str = "user",
        first_name: str = "Ada",
        last_name: str = "Lovelace",
    ) -> User:
        counter["n"] += 1
        async with session_scope(session_factory) as session:
            user = User(
                first_name=first_name,
                last_name=last_name,
                email=email or f"user{counter['n']}@test.com",
                password=hash_password(password, pwd_context),
                role=role,
                documents=[],
                last_connection=None,
            )
            session.add(user)
            await session.flush()
        return user

    return _make_user


@pytest.fixture
def make_pet(session_factory):
    """Insert an available pet directly through the ORM; returns the Pet row."""

    async def _make_pet(name: str = "Rex", specie: str = "dog") -> Pet:
        async with session_scope(session_factory) as session:
            pet = Pet(
                name=name,
                specie=specie,
                birth_date=date(2020, 5, 17),
                adopted=False,
                owner_id=None,
                image=None,
            )
            session.add(pet)
            await session.flush()
        return pet

    return _make_pet


def session_cookie(response, name: str = "coderCookie") -> Optional[str]:
    """Extract the session cookie value from a response's Set-Cookie headers."""
    for header in response.headers.get_list("set-cookie"):
        match = re.match(rf"{name}=([^;]*)", header)
        if match:
            return match.group(1)
    return None


@pytest.fixture
def read_session_cookie():
    return session_cookie


@pytest_asyncio.fixture
async def logged_in(client, make_user, read_session_cookie):
    """A registered user plus the session cookie header from a real login."""
    user = await make_user(email="session@test.com")
    response = await client.post(
        "/api/sessions/login",
        json={"email": "session@test.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    token = read_session_cookie(response)
    return user, {"Cookie": f"coderCookie={token}"}
