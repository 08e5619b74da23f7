from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from charmemo.core.database import create_session_factory, create_tables

from fakes import FakeDataClient, FakeStore


@pytest.fixture
def store() -> FakeStore:
    store = FakeStore()
    store.seed_character("mario", "マリオ", 1, nameEn="Mario", nameZh="马力欧")
    store.seed_character("luigi", "ルイージ", 2, nameEn="Luigi")
    store.seed_character("peach", "ピーチ", 3, nameEn="Peach")
    return store


@pytest.fixture
def client(store: FakeStore) -> FakeDataClient:
    return FakeDataClient(store, owner="alice")


@pytest.fixture
def other_client(store: FakeStore) -> FakeDataClient:
    return FakeDataClient(store, owner="bob")


@pytest.fixture
def anonymous_client(store: FakeStore) -> FakeDataClient:
    return FakeDataClient(store)


@pytest_asyncio.fixture
async def session_factory():
    """Empty in-memory SQLite database shared by every session"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()
