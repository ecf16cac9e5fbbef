"""Centralized settings management for HackFlow."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import make_url


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file located
    in the project root.
    """

    # -------------------------------------------------------------------------
    # ENVIRONMENT
    # -------------------------------------------------------------------------
    ENV: str = "development"
    PORT: int = 8080

    # -------------------------------------------------------------------------
    # DATABASE
    # -------------------------------------------------------------------------
    DATABASE_URL: str | None = None
    DB_HOST: str = "host.docker.internal"
    DB_USER: str = "hackflow_user"
    DB_PASSWORD: SecretStr = SecretStr("supersecretpassword")
    DB_NAME: str = "hackflow"
    DB_PORT: int = 5432

    # -------------------------------------------------------------------------
    # EXTERNAL SERVICES
    # -------------------------------------------------------------------------
    GEMINI_API_KEY: SecretStr | None = None
    OPENAI_API_KEY: SecretStr | None = None
    ANTHROPIC_API_KEY: SecretStr | None = None
    TAVILY_API_KEY: SecretStr | None = None

    LLM_PROVIDER: str = "google"
    LLM_MODEL: str = "gemini-2.5-flash-lite"
    SEARCH_LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = Field(default=0.1, ge=0.0, le=1.0)
    SEARCH_LLM_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=1.0)

    # -------------------------------------------------------------------------
    # TIMEOUTS
    # -------------------------------------------------------------------------
    LLM_TIMEOUT_S: float = Field(default=60.0, gt=0)
    FETCH_TIMEOUT_S: float = Field(default=15.0, gt=0)
    SEARCH_TIMEOUT_S: float = Field(default=30.0, gt=0)

    # -------------------------------------------------------------------------
    # INGESTION
    # -------------------------------------------------------------------------
    SCRAPE_INTERVAL: str = "6h"
    RETENTION_DAYS: int = Field(default=60, gt=0)
    EXTRACTION_DELAY_S: float = Field(default=3.0, ge=0)
    RATE_LIMIT_STRATEGY: str = "fixed"
    CHANNELS: list[str] | None = None

    # -------------------------------------------------------------------------
    # API
    # -------------------------------------------------------------------------
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_psycopg2_params(self) -> dict:
        """
        Build psycopg2-compatible connection parameters.

        DATABASE_URL wins when set; otherwise the discrete DB_* variables
        are used.

        Returns
        -------
        dict
            psycopg2 connection arguments (host, port, dbname, user, password).
        """
        if self.DATABASE_URL:
            url = make_url(self.DATABASE_URL)
            return {
                "host": url.host,
                "port": url.port,
                "dbname": url.database,
                "user": url.username,
                "password": url.password,
            }
        return {
            "host": self.DB_HOST,
            "port": self.DB_PORT,
            "dbname": self.DB_NAME,
            "user": self.DB_USER,
            "password": self.DB_PASSWORD.get_secret_value(),
        }

    def llm_api_key(self, provider: str | None = None) -> str | None:
        """Return the raw API key for an LLM provider, if configured."""
        provider = (provider or self.LLM_PROVIDER).lower()
        secret = {
            "google": self.GEMINI_API_KEY,
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
        }.get(provider)
        return secret.get_secret_value() if secret else None


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
