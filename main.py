import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from api.api import api_router, add_exception_handlers
from core.async_engine import create_engine_from_settings, create_session_factory, init_models
from core.settings import Settings, settings as default_settings
from crud.vote_crud import VoteStore
from services.tally_service import TallyService

logging.basicConfig(level=default_settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Storage is opened once here; failing to reach it aborts startup
        engine = create_engine_from_settings(settings)
        try:
            await init_models(engine, create=settings.AUTO_CREATE_SCHEMA)
            store = VoteStore(
                create_session_factory(engine),
                timeout=settings.STORAGE_TIMEOUT_SECONDS,
                max_name_length=settings.MAX_NAME_LENGTH,
            )
            app.state.tally_service = TallyService(store, max_name_length=settings.MAX_NAME_LENGTH)
            yield
        finally:
            await engine.dispose()
            logger.info("Storage connections closed")

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

    if settings.BACKEND_CORS_ORIGINS:
        logger.info(f"Adding CORS middleware with origins: {settings.BACKEND_CORS_ORIGINS}")
        cors_origins = [str(origin) for origin in settings.BACKEND_CORS_ORIGINS]
    else:
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=cors_origins != ["*"],  # Don't use credentials with wildcard
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"message": settings.PROJECT_NAME, "version": settings.VERSION}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    run_args = {
        "app": "main:app",
        "host": default_settings.SERVER_ADDRESS,
        "port": default_settings.SERVER_PORT,
        "log_level": default_settings.LOG_LEVEL,
        "reload": default_settings.WATCH_FILES,
    }

    uvicorn.run(**run_args)
