"""Application settings."""

from __future__ import annotations

import json
from functools import cached_property
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration entrypoint for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # Server
    host: str = "127.0.0.1"
    port: int = 5000
    allowed_origins: list[str] = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]

    # Observability
    log_level: str = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite:///./data/nasa.db",
        validation_alias=AliasChoices("DATABASE_URL"),
    )
    db_echo: bool = Field(
        default=False,
        validation_alias=AliasChoices("DB_ECHO", "SQL_ECHO"),
    )

    # NASA upstream
    nasa_api_key: str = Field(
        default="DEMO_KEY",
        validation_alias=AliasChoices("NASA_API_KEY", "NASA_KEY"),
    )
    nasa_api_base_url: str = "https://api.nasa.gov"
    nasa_timeout_seconds: float = 15.0

    # Tokens
    jwt_issuer: str = "self"
    jwt_lifetime_seconds: int = 60 * 30
    jwt_key_size: int = 2048
    auth_cookie_name: str = "nasa-auth"

    # Seed members created on startup when both fields are set
    admin_username: str | None = None
    admin_password: str | None = None
    employee_username: str | None = None
    employee_password: str | None = None

    # CSRF Protection
    csrf_secret: str = Field(
        default="dev-csrf-secret-change-me",
        validation_alias=AliasChoices("CSRF_SECRET", "CSRF_SECRET_KEY"),
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize ALLOWED_ORIGINS env input into a list."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []
            if raw.startswith("["):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        return []

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Expose allowed CORS origins for middleware wiring."""
        return self.allowed_origins

    @cached_property
    def resolved_database_url(self) -> str:
        """Return the SQLAlchemy URL."""
        return self.database_url

    @property
    def apod_url(self) -> str:
        return f"{self.nasa_api_base_url.rstrip('/')}/planetary/apod"

    @property
    def rovers_url(self) -> str:
        return f"{self.nasa_api_base_url.rstrip('/')}/mars-photos/api/v1/rovers"


settings = Settings()
