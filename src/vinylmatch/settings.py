"""Environment settings using pydantic-settings."""

from functools import cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import AliasChoices, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vinylmatch.config import (
    DEFAULT_API_BASE,
    DEFAULT_USER_AGENT,
    CacheConfig,
    DiscogsConfig,
)

LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]


class Settings(BaseSettings):
    """Settings read from ``VINYLMATCH_*`` variables and ``.env``.

    ``DISCOGS_TOKEN`` and ``DISCOGS_USER_AGENT`` are accepted without the
    prefix as well.
    """

    model_config = SettingsConfigDict(
        env_prefix="VINYLMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    discogs_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("VINYLMATCH_DISCOGS_TOKEN", "DISCOGS_TOKEN"),
        description="Discogs personal access token",
    )
    discogs_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "VINYLMATCH_DISCOGS_USER_AGENT", "DISCOGS_USER_AGENT"
        ),
        description="User-Agent sent to Discogs",
    )
    discogs_api_base: str = Field(
        default=DEFAULT_API_BASE, description="Discogs API base URL"
    )
    cache_dir: Path = Field(
        default=Path("cache") / "discogs", description="Link cache directory"
    )
    log_level: LogLevel = Field(default="WARNING", description="Log level")

    def to_discogs_config(self) -> DiscogsConfig:
        return DiscogsConfig(
            token=self.discogs_token,
            user_agent=self.discogs_user_agent,
            api_base=self.discogs_api_base,
        )

    def to_cache_config(self) -> CacheConfig:
        return CacheConfig(cache_dir=self.cache_dir)


@cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
