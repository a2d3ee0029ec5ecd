# app/core/config.py
from __future__ import annotations

import json
import os
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()

DEFAULT_SEARCH_COLUMNS = ("name", "category")

# Tables and columns the public search endpoints may touch.
DEFAULT_ALLOW_LIST: Dict[str, Dict[str, Any]] = {
    "items": {
        "columns": ["id", "name", "category", "price_ugx", "available"],
        "search_columns": ["name", "category"],
    },
    "users": {
        "columns": ["id", "email", "role"],
        "search_columns": ["email"],
    },
    "orders": {
        "columns": ["id", "user_id", "status", "total_cost"],
        "search_columns": ["status"],
    },
}


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    app_name: str = "model-registry-search"
    DATABASE_URL: str = Field(..., description="Postgres DSN")
    SERVER_ADDRESS: str = ":5000"
    JWT_SECRET: Optional[str] = None
    DB_MAX_OPEN_CONNS: int = Field(20, gt=0)
    DB_MAX_IDLE_CONNS: int = Field(5, ge=0)
    DB_CONN_MAX_LIFETIME: float = Field(1800.0, gt=0)
    SEARCH_TIMEOUT: float = Field(2.0, gt=0)
    POOL_ACQUIRE_TIMEOUT: float = Field(10.0, gt=0)
    SEARCH_ALLOW_LIST: Dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_ALLOW_LIST))
    RUN_MIGRATIONS: bool = True
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _require_dsn(cls, value: Optional[str]) -> str:
        if value is None or not str(value).strip():
            raise ValueError("env var DATABASE_URL is required")
        return str(value).strip()

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def _blank_secret_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("SEARCH_ALLOW_LIST", mode="before")
    @classmethod
    def _parse_allow_list(cls, value: Any) -> Dict[str, Any]:
        if value is None or value == "":
            return dict(DEFAULT_ALLOW_LIST)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"SEARCH_ALLOW_LIST is not valid JSON: {exc}") from exc
        if not isinstance(value, dict):
            raise ValueError("SEARCH_ALLOW_LIST must be a JSON object")
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, value: Optional[str]) -> str:
        return (value or "INFO").strip().upper()

    @property
    def host_port(self) -> tuple[str, int]:
        """Split SERVER_ADDRESS (":5000", "0.0.0.0:8080") into uvicorn's host/port."""
        host, _, port = self.SERVER_ADDRESS.rpartition(":")
        return (host or "0.0.0.0", int(port))


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _env_flag(key: str, default: str = "true") -> bool:
    return (_read_env(key, default) or "").lower() not in {"0", "false", "no"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings from the environment."""
    values: Dict[str, Any] = {
        "DATABASE_URL": _read_env("DATABASE_URL"),
        "JWT_SECRET": _read_env("JWT_SECRET"),
        "SEARCH_ALLOW_LIST": _read_env("SEARCH_ALLOW_LIST"),
        "RUN_MIGRATIONS": _env_flag("RUN_MIGRATIONS"),
        "LOG_LEVEL": _read_env("LOG_LEVEL"),
    }
    for key in (
        "SERVER_ADDRESS",
        "DB_MAX_OPEN_CONNS",
        "DB_MAX_IDLE_CONNS",
        "DB_CONN_MAX_LIFETIME",
        "SEARCH_TIMEOUT",
        "POOL_ACQUIRE_TIMEOUT",
    ):
        raw = _read_env(key)
        if raw:
            values[key] = raw
    return Settings(**values)


def reload_settings() -> Settings:
    """Clear cached settings (useful for tests) and reload."""
    get_settings.cache_clear()
    return get_settings()


# usage: settings = get_settings()
