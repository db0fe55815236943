import asyncio
import logging
from typing import Sequence

from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.async_engine import uses_single_connection
from core.exceptions import StoreBackendError, StoreInvalidInputError
from models import Vote

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def clean_name(field: str, value: str, max_length: int) -> str:
    """Trim `value` and check it is a usable name for `field`."""
    if not isinstance(value, str):
        raise StoreInvalidInputError(field, f"{field} must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise StoreInvalidInputError(field, f"{field} must not be empty")
    if len(cleaned) > max_length:
        raise StoreInvalidInputError(field, f"{field} must be at most {max_length} characters")
    return cleaned


class VoteStore:
    """Current vote per voter, one row each, keyed by voter name.

    Every call opens its own session and gives the connection back before
    returning. Calls that do not finish within `timeout` seconds fail with
    StoreBackendError. On a single shared connection (in-memory SQLite) calls
    run one at a time, since one session ending would end the others.
    """

    def __init__(self, session_factory: async_sessionmaker, timeout: float = 5.0, max_name_length: int = 255):
        self.table = Vote
        self._session_factory = session_factory
        self._timeout = timeout
        self._max_name_length = max_name_length
        bind = session_factory.kw.get("bind")
        self._lock = asyncio.Lock() if bind is not None and uses_single_connection(bind) else None

    async def upsert(self, voter_name: str, restaurant_name: str) -> None:
        voter_name = clean_name("voter_name", voter_name, self._max_name_length)
        restaurant_name = clean_name("restaurant_name", restaurant_name, self._max_name_length)
        await self._run("upsert", self._upsert(voter_name, restaurant_name))

    async def fetch_all(self) -> Sequence[Vote]:
        return await self._run("fetch_all", self._fetch_all())

    async def _upsert(self, voter_name: str, restaurant_name: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                stmt = self._upsert_statement(session, voter_name, restaurant_name)
                await session.execute(stmt)

    async def _fetch_all(self) -> Sequence[Vote]:
        async with self._session_factory() as session:
            async with session.begin():
                stmt = select(Vote).order_by(Vote.voter_name)
                result = await session.execute(stmt)
                return result.scalars().all()

    def _upsert_statement(self, session: AsyncSession, voter_name: str, restaurant_name: str):
        dialect = session.bind.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise StoreBackendError(f"Upsert is not supported on the {dialect} backend")

        stmt = insert(Vote).values(voter_name=voter_name, restaurant_name=restaurant_name)
        return stmt.on_conflict_do_update(
            index_elements=[Vote.voter_name],
            set_={
                "restaurant_name": stmt.excluded.restaurant_name,
                "voted_at": func.now(),
            },
        )

    async def _serialized(self, coro):
        try:
            await self._lock.acquire()
        except asyncio.CancelledError:
            coro.close()
            raise
        try:
            return await coro
        finally:
            self._lock.release()

    async def _run(self, operation: str, coro):
        if self._lock is not None:
            coro = self._serialized(coro)
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Vote store {operation} timed out after {self._timeout}s")
            raise StoreBackendError(f"{operation} timed out after {self._timeout}s") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Vote store {operation} failed: {e}")
            raise StoreBackendError(f"{operation} failed: {e}") from e
