"""Environment-driven configuration for the warehouse service.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment first and then from ``.env`` / ``.env.local`` so a fresh
checkout boots against a local SQLite file without extra setup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Warehouse Manager"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")

    # Empty means "SQLite file under DATA_DIR", resolved in get_settings().
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DATABASE_URL", "DB_URL"))

    JWT_SECRET: str = "change-me"
    JWT_ACCESS_TTL_MIN: int = 60 * 24
    JWT_REFRESH_TTL_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # Comma separated in the environment, split by the validator below.
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:8080", "http://localhost:8081"]
    )

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    DEFAULT_PAGE_SIZE: int = 20
    DASHBOARD_WINDOW_DAYS: int = 30

    @property
    def is_sqlite(self) -> bool:
        return self.DB_URL.startswith("sqlite")

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    if not settings.DB_URL:
        settings.DB_URL = f"sqlite:///{settings.DATA_DIR / 'warehouse.db'}"
    return settings


# Importing ``settings`` anywhere gives the same cached instance.
settings = get_settings()
