from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pikpix import __version__


class Settings(BaseSettings):
    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(
        default=False, description="Render log records as JSON instead of console text"
    )

    # CLI Behavior
    show_progress: bool = Field(
        default=True, description="Show a progress bar while processing items"
    )

    # Remote inputs
    fetch_timeout: Optional[float] = Field(
        default=None,
        description="Timeout in seconds for fetching remote images (None disables it)",
    )
    follow_redirects: bool = Field(
        default=True, description="Follow HTTP redirects when fetching remote images"
    )
    user_agent: str = Field(
        default=f"pikpix/{__version__}", description="User-Agent sent with fetches"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("fetch_timeout")
    @classmethod
    def validate_fetch_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("fetch_timeout must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PIKPIX_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
