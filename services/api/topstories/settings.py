"""Application settings via Pydantic Settings."""

from functools import lru_cache
import json

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "HN Top Stories API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Redis (sole owner of stories, stats and the top-stories pointer)
    redis_url: str = "redis://localhost:6379/0"

    # CORS
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: object) -> list[str]:
        """
        Accept either:
        - JSON array string: '["https://a.com","http://localhost:3000"]'
        - Comma-separated string: "https://a.com,http://localhost:3000"
        - Already-parsed list[str]
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError:
                    parsed = s.split(",")
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
                return [str(parsed).strip()]
            return [part.strip() for part in s.split(",") if part.strip()]
        return [str(v).strip()] if str(v).strip() else []

    # Hacker News API (read-only upstream)
    hn_api_base_url: str = Field(
        default="https://hacker-news.firebaseio.com",
        validation_alias=AliasChoices("HN_API_BASE_URL"),
    )
    hn_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("HN_TIMEOUT_SECONDS"),
        gt=0,
    )

    # healthchecks.io (scheduled refresh reporting, optional)
    healthcheck_io_id: str = Field(
        default="",
        validation_alias=AliasChoices("HEALTHCHECK_IO_ID", "HEALTHCHECKS_IO_ID"),
    )
    healthcheck_base_url: str = Field(
        default="https://hc-ping.com",
        validation_alias=AliasChoices("HEALTHCHECK_BASE_URL"),
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
