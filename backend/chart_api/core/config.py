# backend/chart_api/core/config.py
from __future__ import annotations
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolves to <repo-root>/backend/.env
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

PAYLOAD_FORMATS = ("standard", "legacy", "chartjs")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Price Chart API"
    APP_VERSION: str = "2.0.0"

    # --- MongoDB (no default URI: credentials must come from the environment)
    MONGO_URI: str
    MONGO_DB_NAME: str = "GKI"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGO_MAX_POOL_SIZE: int = 10
    QUERY_TIMEOUT_SECONDS: float = 10.0

    # --- Stored record layout
    DATE_FIELD: str = "Date"
    PRICE_FIELD: str = "Close"
    DATE_DAYFIRST: bool = True

    # --- Response
    PAYLOAD_FORMAT: str = "standard"
    SOURCE_NAME: str = "MongoDB"

    # --- Server
    ENV: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RELOAD: bool = False
    API_PREFIX: str = "/api"
    # Comma-separated, e.g. http://localhost:3000,https://codepen.io
    CORS_ORIGINS: str = "*"

    # --- Logging
    LOG_LEVEL: str = "INFO"
    # Empty means backend/logs; LOG_FILE="" disables the file handler
    LOG_DIR: str = ""
    LOG_FILE: str = "chart-api.log"
    LOG_MAX_BYTES: int = 2_000_000
    LOG_BACKUP_COUNT: int = 5

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()] or ["*"]

    @field_validator("MONGO_URI")
    @classmethod
    def _require_uri(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("MONGO_URI must be set")
        return v

    @field_validator("PAYLOAD_FORMAT")
    @classmethod
    def _validate_format(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in PAYLOAD_FORMATS:
            raise ValueError(f"PAYLOAD_FORMAT must be one of {', '.join(PAYLOAD_FORMATS)}")
        return v

    @field_validator("QUERY_TIMEOUT_SECONDS")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive")
        return v


settings = Settings()
