import json
import os

from typing import Annotated, Optional

from pydantic import PostgresDsn, field_validator
from pydantic.fields import computed_field
from pydantic_settings import BaseSettings, NoDecode


SQLITE_FALLBACK_URI = "sqlite+aiosqlite:///./lunch_votes.db"


class Settings(BaseSettings):

    PROJECT_NAME: str = "Lunch Vote API"
    VERSION: str = "1.0.0"
    SERVER_ADDRESS: str = "0.0.0.0"
    SERVER_PORT: int = int(os.getenv("PORT", 3000))
    # Raw env string reaches the validator: JSON list or comma separated
    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    raise ValueError(v) from None
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: float = 10.0
    DB_POOL_RECYCLE: int = 600
    STORAGE_TIMEOUT_SECONDS: float = 5.0
    AUTO_CREATE_SCHEMA: bool = True

    MAX_NAME_LENGTH: int = 255

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            db_url = self.DATABASE_URL
            # Convert postgresql:// to postgresql+psycopg:// for compatibility
            if db_url.startswith("postgresql://"):
                db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)
            return db_url

        if not all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_SERVER, self.POSTGRES_DB]):
            return SQLITE_FALLBACK_URI

        return str(
            PostgresDsn.build(
                scheme="postgresql+psycopg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                path=f"{self.POSTGRES_DB or ''}",
            )
        )

    WATCH_FILES: bool = False
    LOG_LEVEL: str = "info"  # Logging level: critical, error, warning, info, debug

    class Config:
        env_file = "local.env"
        case_sensitive = True
        extra = "ignore"
        env_ignore_empty = True


settings = Settings()
