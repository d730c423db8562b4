"""
MessMate settings, read from the environment or a ``.env`` file.

Every field maps to an upper-case environment variable of the same name,
e.g. ``DATABASE_URL`` or ``MEAL_RATE_FALLBACK_ON_ERROR``.
"""

import logging
from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="MessMate", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/messmate",
        description="SQLAlchemy database URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Mess accounting
    default_currency: str = Field(default="৳", description="Currency for new messes")
    meal_rate_fallback_on_error: bool = Field(
        default=False,
        description="Serve the default meal rate when the data store fails",
    )

    # Pagination
    default_page_size: int = Field(default=10, ge=1, description="Default page size")
    max_page_size: int = Field(default=100, ge=1, description="Maximum page size")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s %(message)s",
        description="Log format string",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="MessMate API", description="API documentation title"
    )
    api_description: str = Field(
        default="Shared-living meal, expense and deposit tracking",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


settings = Settings()
