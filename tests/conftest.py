"""Pytest fixtures for the lunch vote service.

Every test gets its own SQLite database file under pytest's tmp_path, so
tests never share votes.
"""

from typing import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI

from core.async_engine import create_engine_from_settings, create_session_factory, init_models
from core.settings import Settings
from crud.vote_crud import VoteStore
from main import create_app
from services.tally_service import TallyService


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'votes.db'}",
        DB_POOL_SIZE=5,
        STORAGE_TIMEOUT_SECONDS=10.0,
    )


@pytest.fixture
async def engine(settings: Settings):
    engine = create_engine_from_settings(settings)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine) -> VoteStore:
    return VoteStore(create_session_factory(engine), timeout=10.0)


@pytest.fixture
def service(store: VoteStore) -> TallyService:
    return TallyService(store)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app, with its lifespan (storage open/close) running."""
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest.fixture
async def memory_engine():
    """Engine on in-memory SQLite, a single connection shared by every session."""
    engine = create_engine_from_settings(Settings(DATABASE_URL="sqlite+aiosqlite://"))
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def memory_service(memory_engine) -> TallyService:
    return TallyService(VoteStore(create_session_factory(memory_engine), timeout=10.0))
