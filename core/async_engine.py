import logging

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.base import Base
from core.settings import Settings

logger = logging.getLogger(__name__)


def _is_memory_sqlite(database_uri: str) -> bool:
    url = make_url(database_uri)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    database_uri = settings.SQLALCHEMY_DATABASE_URI

    if _is_memory_sqlite(database_uri):
        # One shared connection, otherwise every checkout sees an empty database
        return create_async_engine(
            database_uri,
            poolclass=StaticPool,
        )

    return create_async_engine(
        database_uri,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_use_lifo=True,
    )


def uses_single_connection(engine: AsyncEngine) -> bool:
    return isinstance(engine.pool, StaticPool)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, autocommit=False, expire_on_commit=False)


async def init_models(engine: AsyncEngine, create: bool = True) -> None:
    """Create missing tables, or just check the database answers when `create` is off."""
    import models  # noqa: F401  registers the mapped tables on Base.metadata

    async with engine.begin() as conn:
        if create:
            await conn.run_sync(Base.metadata.create_all)
        else:
            await conn.execute(text("SELECT 1"))

    logger.info(f"Storage ready at {engine.url.render_as_string(hide_password=True)}")
