"""Async engine and session factory for the target registry."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from price_sniper.config import Settings


def build_database_url(settings: Settings):
    """Combine the configured URL and optional access key into one URL."""
    url = make_url(settings.database_url)
    if settings.database_key is not None:
        url = url.set(password=settings.database_key.get_secret_value())
    return url


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the registry."""
    url = build_database_url(settings)
    options = {"echo": settings.database_echo}
    if url.get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(engine, expire_on_commit=False)
