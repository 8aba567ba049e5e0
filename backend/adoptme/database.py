"""
AdoptMe Backend - Database Engine & Session Management
=======================================================

What:  Async SQLAlchemy engine construction, session factory, declarative
       base and the unit-of-work helper used by every service.
How:   `build_engine()` and `build_session_factory()` are called once by
       `create_app()`; the resulting factory is stored on `app.state` and
       handed to services through their constructors. `session_scope()`
       wraps one transaction: commit on success, rollback on any error.
Who:   main.py (construction and disposal), services (units of work),
       Alembic env.py (metadata).

Connection Pooling:
    PostgreSQL       pool_size / max_overflow from settings, pre-ping enabled,
                     connections recycled hourly
    SQLite file      default pool, one connection per session
    SQLite :memory:  StaticPool; the database lives in that single connection,
                     so every session of the process shares it

SQLite units of work run one at a time (see `session_scope`): SQLite admits
a single writer, and sessions sharing a StaticPool connection would
otherwise commit or roll back each other's statements.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncIterator

from sqlalchemy import MetaData, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from adoptme.config import Settings

logger = logging.getLogger(__name__)

# Deterministic constraint names so Alembic migrations match the models
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one MetaData object (with a naming convention) across models so
    `Base.metadata.create_all()` and Alembic autogenerate see every table.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ── Engine Configuration ──────────────────────────────────────────────────
def is_memory_database(database_url: str) -> bool:
    url = make_url(database_url)
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    SQLite drivers reject the pool sizing arguments. An in-memory database
    exists only inside its connection, so it gets a StaticPool; file-backed
    SQLite keeps the default pool.
    """
    echo = settings.log_level == "DEBUG"
    if settings.is_sqlite:
        if is_memory_database(settings.database_url):
            return create_async_engine(
                settings.database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
        return create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


# ── Session Factory ───────────────────────────────────────────────────────
# Session.info key of the lock that serializes SQLite units of work
UNIT_OF_WORK_LOCK = "unit_of_work_lock"


# expire_on_commit=False: objects stay readable after the unit of work ends,
# which is when services build their response schemas.
def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    info = {}
    if engine.dialect.name == "sqlite":
        info[UNIT_OF_WORK_LOCK] = asyncio.Lock()
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        info=info,
    )


# ── Unit of Work ──────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide one transactional session.

    How it works:
        1. Opens a new session from the factory
        2. On SQLite: waits until no other unit of work is running
        3. Yields it to the caller (repositories issue their statements)
        4. On success: commits every write as one transaction
        5. On any exception: rolls back and re-raises
        6. Always: closes the session (connection returns to the pool)
           before the next unit of work may start

    Units of work must not be nested: on SQLite the inner one would wait
    for the outer one forever.

    Example:
        async with session_scope(factory) as session:
            pets = PetRepository(session)
            await pets.create(name="Rex", specie="dog")
    """
    async with session_factory() as session:
        async with session.info.get(UNIT_OF_WORK_LOCK) or nullcontext():
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_all(engine: AsyncEngine) -> None:
    """Create missing tables from model metadata (dev/test convenience)."""
    # Import for side effects: registers every model on Base.metadata
    import adoptme.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured (%d tables)", len(Base.metadata.tables))


async def dispose_engine(engine: AsyncEngine) -> None:
    """Gracefully close all pooled connections (called on shutdown)."""
    await engine.dispose()
