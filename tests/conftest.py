"""Shared fixtures: in-memory SQLite database with foreign keys enforced."""

import itertools

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.crud import CategoryCRUD, UserCRUD
from database.models import Base, Category, User, UserRole

_counter = itertools.count(1)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session):
    async def _make_user(role: UserRole = UserRole.USER) -> User:
        n = next(_counter)
        return await UserCRUD(session).create_user(
            login_id=f"test_{n}",
            password="pw",
            email=f"test{n}@mail.com",
            nickname=f"tester{n}",
            role=role,
        )

    return _make_user


@pytest.fixture
def make_category(session):
    async def _make_category(name: str) -> Category:
        return await CategoryCRUD(session).create_category(name)

    return _make_category
