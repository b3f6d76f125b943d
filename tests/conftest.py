"""Shared fixtures: a throwaway SQLite registry and test settings."""

from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio

from price_sniper.config import Settings
from price_sniper.db.models import Base, TrackingTarget
from price_sniper.db.session import create_engine, create_session_factory


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}",
        reading_delay_min_ms=2000,
        reading_delay_max_ms=4000,
        target_spacing_seconds=5.0,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def add_target(session_factory):
    """Insert a registry row and return its id."""

    async def _add(
        display_name: str = "Echo Dot",
        locator: Optional[str] = "https://www.amazon.in/dp/B09B8V1LZ3",
        status: str = "tracking",
        current_price: Optional[Decimal] = None,
        stock_status: Optional[str] = None,
    ) -> int:
        async with session_factory() as db:
            target = TrackingTarget(
                display_name=display_name,
                locator=locator,
                status=status,
                current_price=current_price,
                stock_status=stock_status,
            )
            db.add(target)
            await db.commit()
            return target.id

    return _add


@pytest.fixture
def get_target(session_factory):
    """Fetch a registry row by id."""

    async def _get(target_id: int) -> Optional[TrackingTarget]:
        async with session_factory() as db:
            return await db.get(TrackingTarget, target_id)

    return _get
