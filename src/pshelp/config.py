"""Configuration management for pshelp."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pshelp.errors import ConfigurationError

LogFormat = Literal["text", "rich"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="PSHELP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Help backend
    powershell: Path | None = Field(None, description="PowerShell executable, auto-detected when unset")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for one Get-Help run in seconds")

    # Viewer
    viewer_title: str = Field(default="Help", description="Title shown above help text")
    keep_output: bool = Field(default=False, description="Keep the temporary help file after viewing")
    use_pager: bool = Field(default=True, description="Page help text through the console pager")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: LogFormat = Field(default="text", description="Log format: text lines or rich console output")


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment and ``.env``, applying non-None overrides."""

    updates = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**updates)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
