"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.shiori.config import Settings
from backend.shiori.db.engine import create_session_factory, enable_sqlite_foreign_keys
from backend.shiori.db.models import Base
from backend.shiori.planning.manager import ItineraryManager
from backend.shiori.transfer.codec import TransferCodec

# 2023-11-14T22:13:20Z, i.e. 2023-11-15 in Asia/Tokyo
FIXED_NOW_MS = 1_700_000_000_000


class SequentialIds:
    """Deterministic ID factory: id-1, id-2, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


class FakeClock:
    """Epoch-millis clock that only moves when told to."""

    def __init__(self, now: int = FIXED_NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with FK enforcement.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        default_currency="JPY",
        display_timezone="Asia/Tokyo",
        display_locale="ja",
        ors_api_key="test-ors-key",
        geocode_min_interval_seconds=0,
    )


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(
    session: AsyncSession, ids: SequentialIds, clock: FakeClock, settings: Settings
) -> ItineraryManager:
    return ItineraryManager(session, id_factory=ids, clock=clock, settings=settings)


@pytest.fixture
def codec(manager: ItineraryManager) -> TransferCodec:
    return TransferCodec(manager)
