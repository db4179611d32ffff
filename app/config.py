"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""


import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logger import setup_logger

load_dotenv(override=True)


logger = setup_logger("core_config")

DEFAULT_SECRET_KEY = "your-secret-key-change-this-in-production"

DOCUMENT_STORE = "document-store"
RELATIONAL = "relational"

# Accepted spellings for DATABASE_TYPE
_DATABASE_TYPE_SYNONYMS = {
    "document-store": DOCUMENT_STORE,
    "document": DOCUMENT_STORE,
    "mongodb": DOCUMENT_STORE,
    "mongo": DOCUMENT_STORE,
    "relational": RELATIONAL,
    "postgresql": RELATIONAL,
    "postgres": RELATIONAL,
    "sql": RELATIONAL,
}


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
    )

    # ===== Storage engine selection =====
    database_type: Literal["document-store", "relational"] = Field(
        default=DOCUMENT_STORE,
        alias="DATABASE_TYPE",
        description="Storage engine backing the DatabaseManager: 'document-store' or 'relational'",
    )

    # ===== Document store (MongoDB) =====
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        alias="DB_CONNECT",
        description="MongoDB connection string",
    )
    mongodb_database: str = Field(
        default="playlister",
        alias="MONGODB_DATABASE",
        description="MongoDB database name",
    )
    mongodb_server_selection_timeout_ms: int = Field(
        default=5000,
        alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS",
        description="How long connect() waits for a MongoDB server before failing",
    )

    # ===== Relational (PostgreSQL) =====
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")
    postgres_user: str = Field(default="postgres", alias="POSTGRES_USER")
    postgres_password: str = Field(default="", alias="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="playlister", alias="POSTGRES_DB")
    relational_database_url_override: str | None = Field(
        default=None,
        alias="PLAYLISTER_DATABASE_URL",
        description="Full SQLAlchemy URL, overrides the POSTGRES_* settings",
    )

    # ===== Authentication =====
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        alias="SECRET_KEY",
        description="Key used to sign JWT access tokens",
    )
    access_token_expire_minutes: int = Field(
        default=1440,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Lifetime of issued access tokens (24 hours by default)",
    )
    auth_cookie_name: str = Field(default="token", alias="AUTH_COOKIE_NAME")
    auth_cookie_secure: bool = Field(
        default=False,
        alias="AUTH_COOKIE_SECURE",
        description="Send the auth cookie over HTTPS only",
    )

    # ===== Server =====
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=4000, alias="SERVER_PORT")
    server_workers: int = Field(default=1, alias="SERVER_WORKERS")

    cors_allow_origins: list[str] = Field(
        default=["http://localhost:3000"], alias="CORS_ALLOW_ORIGINS"
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    db_unavailable_hint: str = os.getenv(
        "DB_UNAVAILABLE_HINT",
        "Database connection failed. The server may be offline or network connectivity is down.",
    )

    @field_validator("database_type", mode="before")
    @classmethod
    def normalize_database_type(cls, v):
        """Map engine synonyms (mongodb, postgres, ...) onto the two supported values."""
        if isinstance(v, str):
            normalized = _DATABASE_TYPE_SYNONYMS.get(v.strip().lower())
            if normalized is None:
                raise ValueError(
                    f"Unknown database type: {v}. Use '{DOCUMENT_STORE}' or '{RELATIONAL}'"
                )
            return normalized
        return v

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings and log warnings for insecure or missing configuration."""

        if self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning("SECRET_KEY environment variable not set, using default.")

        if self.database_type == RELATIONAL and not (
            self.relational_database_url_override or self.postgres_password
        ):
            logger.warning("POSTGRES_PASSWORD environment variable not set.")

        logger.debug(f"Using database type: {self.database_type}")

        return self

    @property
    def relational_database_url(self) -> str:
        """SQLAlchemy async URL for the relational backend."""
        url = self.relational_database_url_override
        if not url:
            url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


# Global settings instance
settings = Settings()
