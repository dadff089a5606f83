"""
Application settings and configuration management.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from channelsieve import __version__

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHANNELSIEVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="channelsieve")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Fetcher
    fetch_concurrency: int = Field(default=1, ge=1)
    fetch_min_interval_ms: int = Field(default=1500, ge=0)
    fetch_jitter_ms: int = Field(default=500, ge=0)
    fetch_max_retries: int = Field(default=6, ge=0)
    fetch_timeout_seconds: float = Field(default=25.0, gt=0)
    fetch_user_agent: str = Field(default=DEFAULT_USER_AGENT)
    fetch_accept_language: str = Field(default="de,de-DE;q=1.0,en;q=0.5")
    block_scan_max_chars: int = Field(default=200_000, gt=0)
    host_rules: dict[str, dict[str, int]] = Field(
        default={
            "www.youtube.com": {"min_interval_ms": 4500, "jitter_ms": 1200},
            "youtube.com": {"min_interval_ms": 4500, "jitter_ms": 1200},
        }
    )

    # Pipeline
    videos_limit: int = Field(default=30, ge=0)
    skip_videos: bool = Field(default=False)
    tab_switch_pause_min_ms: int = Field(default=2000, ge=0)
    tab_switch_pause_max_ms: int = Field(default=5000, ge=0)
    channel_pause_min_ms: int = Field(default=5000, ge=0)
    channel_pause_max_ms: int = Field(default=12000, ge=0)

    # Storage
    rules_file: Path | None = Field(default=None)
    output_dir: Path = Field(default=Path("./output"))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("host_rules")
    @classmethod
    def normalize_host_rules(cls, v: dict[str, dict[str, int]]) -> dict[str, dict[str, int]]:
        """Lowercase host keys so lookups are case-insensitive."""
        return {host.strip().lower(): rule for host, rule in v.items()}

    @model_validator(mode="after")
    def validate_pause_ranges(self) -> Settings:
        """Ensure every pause range has min <= max."""
        if self.tab_switch_pause_min_ms > self.tab_switch_pause_max_ms:
            raise ValueError("tab_switch_pause_min_ms must be <= tab_switch_pause_max_ms")
        if self.channel_pause_min_ms > self.channel_pause_max_ms:
            raise ValueError("channel_pause_min_ms must be <= channel_pause_max_ms")
        return self

    def create_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
