"""
Application settings for the ZenPulse insight engine.

Values come from the process environment, falling back to a local ``.env``
file. Settings are resolved once per process; provider availability derived
from them never changes afterwards.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    openai_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("OPENAI_API_KEY")
    )
    openai_model: str = Field(
        default="gpt-4o-mini", validation_alias=AliasChoices("OPENAI_MODEL")
    )
    openai_base_url: str | None = Field(
        default=None, validation_alias=AliasChoices("OPENAI_BASE_URL")
    )
    mistral_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("MISTRAL_API_KEY")
    )
    mistral_model: str = Field(
        default="mistral-medium", validation_alias=AliasChoices("MISTRAL_MODEL")
    )
    mistral_base_url: str = Field(
        default=MISTRAL_DEFAULT_BASE_URL,
        validation_alias=AliasChoices("MISTRAL_BASE_URL"),
    )
    provider_timeout: float = Field(
        default=15.0, gt=0, validation_alias=AliasChoices("PROVIDER_TIMEOUT")
    )
    pep_talk_cache_ttl: float = Field(
        default=300.0, gt=0, validation_alias=AliasChoices("PEP_TALK_CACHE_TTL")
    )
    summary_cache_ttl: float = Field(
        default=600.0, gt=0, validation_alias=AliasChoices("SUMMARY_CACHE_TTL")
    )
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("HOST"))
    port: int = Field(default=8000, validation_alias=AliasChoices("PORT"))
    log_level: str = Field(default="info", validation_alias=AliasChoices("LOG_LEVEL"))


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
