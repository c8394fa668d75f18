"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env file.
The settings object is built once at process start and handed to the
pipeline factory; pipeline stages never read settings themselves.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -----------------
    # LLM API Keys
    # -----------------
    openai_api_key: SecretStr = Field(
        ...,
        description="OpenAI API key for the Responses API and vector stores",
    )
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Optional Anthropic API key when Claude composes answers",
    )

    # -----------------
    # Models
    # -----------------
    extractor_model: str = Field(
        default="gpt-4.1-mini",
        description="Model used for evidence extraction (needs file search)",
    )
    composer_provider: Literal["openai", "anthropic"] = Field(
        default="openai",
        description="Provider for the answer composition stage",
    )
    composer_model: str = Field(
        default="gpt-4.1-mini",
        description="OpenAI model used for answer composition",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used when composer_provider is anthropic",
    )

    # -----------------
    # Oracle calls
    # -----------------
    oracle_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Timeout applied to every oracle call",
    )
    oracle_temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for both oracle stages",
    )

    # -----------------
    # Knowledge stores
    # -----------------
    vectorstores_path: Path = Field(
        default=Path("vectorstores.json"),
        description="JSON file mapping topic keys to vector store ids",
    )
    default_language: str = Field(
        default="auto",
        description="Language used when a request does not name one: auto, en, ar",
    )

    # -----------------
    # Application
    # -----------------
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    # -----------------
    # API
    # -----------------
    api_host: str = Field(
        default="0.0.0.0",
        description="API host",
    )
    api_port: int = Field(
        default=8000,
        description="API port",
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
