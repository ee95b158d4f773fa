"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


UsagePolicy = Literal["everyone", "trusted", "privileged"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Game system identifier; selects which extension variants get registered.
    # Empty means core variants only.
    system_id: str = ""

    # Who may trigger action resolution. Privileged callers always resolve
    # locally; everyone else is forwarded to a privileged executor if allowed.
    #   - everyone: any user may forward
    #   - trusted: trusted users and above may forward
    #   - privileged: only privileged users may use actions at all
    who_can_use_actions: UsagePolicy = "everyone"

    # SQL document store (CLI `document` commands)
    database_url: str = "sqlite:///action_prefabs.db"

    # Debug
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
