"""Application settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main versionist settings, overridable through VERSIONIST_* variables."""

    log_level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level",
    )
    log_format: str = Field(
        default="console", pattern="^(json|console)$", description="Log format"
    )
    log_file: Optional[str] = Field(default=None, description="Optional log file path")
    catalog_path: Optional[str] = Field(
        default=None, description="YAML catalog of schemas, formats and conversions"
    )
    standard_format: str = Field(
        default="standard",
        min_length=1,
        description="Format whose schema is the hub for chained conversions",
    )

    model_config = SettingsConfigDict(
        env_prefix="VERSIONIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """Return process-wide settings."""
    return Settings()
