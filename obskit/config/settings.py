"""Environment settings for obskit."""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from obskit.constants import DEFAULT_LEVEL, LEVEL_ALIASES, LOG_LEVELS, LogLevel

LogFormat = Literal["json", "console"]


def normalize_level(value: Any) -> str | None:
    """Return the canonical level name for value, or None if unrecognised."""
    if not isinstance(value, str):
        return None
    name = value.strip().lower()
    name = LEVEL_ALIASES.get(name, name)
    return name if name in LOG_LEVELS else None


class ObservabilitySettings(BaseSettings):
    """Process-level defaults read from the environment.

    Environment variables:
        LOG_LEVEL: fatal | error | warn | info | debug | trace (default: info)
        LOG_FORMAT: json | console (default: json)

    Unrecognised values fall back to the defaults instead of failing, so a
    typo in the environment never prevents the process from logging.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(default=DEFAULT_LEVEL, description="Minimum log level")
    log_format: LogFormat = Field(default="json", description="Output renderer")

    @field_validator("log_level", mode="before")
    @classmethod
    def _recognised_level(cls, value: Any) -> str:
        return normalize_level(value) or DEFAULT_LEVEL

    @field_validator("log_format", mode="before")
    @classmethod
    def _recognised_format(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in ("json", "console"):
            return value.strip().lower()
        return "json"
