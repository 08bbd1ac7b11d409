"""Logger configuration models.

Options accept snake_case or camelCase keys, so both ``message_key`` and
``messageKey`` are valid.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from obskit.config import get_settings
from obskit.config.settings import LogFormat, normalize_level
from obskit.constants import (
    DEFAULT_ERROR_KEY,
    DEFAULT_LEVEL_KEY,
    DEFAULT_MESSAGE_KEY,
    DEFAULT_REDACT_PATHS,
    REDACTED,
    LogLevel,
)
from obskit.errors import serialize_error

Serializer = Callable[[Any], Any]
LevelFormatter = Callable[[str, int], Mapping[str, Any]]


def label_level(label: str, number: int) -> dict[str, Any]:  # noqa: ARG001
    """Render the level as its name, e.g. ``{"level": "info"}``."""
    return {DEFAULT_LEVEL_KEY: label}


def default_serializers() -> dict[str, Serializer]:
    """Serializers applied by field name: errors under ``error`` and ``err``."""
    return {DEFAULT_ERROR_KEY: serialize_error, "err": serialize_error}


def _default_level() -> str:
    return get_settings().log_level


def _default_format() -> str:
    return get_settings().log_format


class RedactOptions(BaseModel):
    """Which fields to strip from log entries.

    A path without dots matches the key at any depth (case-insensitive);
    a dotted path such as ``user.password`` matches that exact location.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    paths: tuple[str, ...] = Field(
        default=DEFAULT_REDACT_PATHS,
        description="Field names or dotted paths to redact",
    )
    remove: bool = Field(default=True, description="Drop matches instead of masking them")
    censor: str = Field(default=REDACTED, description="Replacement when remove is False")


class Formatters(BaseModel):
    """Output formatting hooks."""

    model_config = ConfigDict(extra="forbid")

    level: LevelFormatter = Field(
        default=label_level,
        description="Maps (label, number) to the fields describing the level",
    )


class LoggerOptions(BaseModel):
    """Options for create_logger, merged over the defaults below."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    level: LogLevel = Field(
        default_factory=_default_level,
        description="Minimum level; defaults to LOG_LEVEL or info",
    )
    redact: RedactOptions = Field(default_factory=RedactOptions)
    base: dict[str, Any] | None = Field(
        default=None,
        description="Fields merged into every entry",
    )
    timestamp: bool | Callable[[], Any] = Field(
        default=True,
        description="Add an ISO-8601 UTC timestamp, or a custom value factory",
    )
    formatters: Formatters = Field(default_factory=Formatters)
    serializers: dict[str, Serializer] = Field(default_factory=default_serializers)
    message_key: str = Field(default=DEFAULT_MESSAGE_KEY, min_length=1)
    error_key: str = Field(default=DEFAULT_ERROR_KEY, min_length=1)
    format: LogFormat = Field(
        default_factory=_default_format,
        description="json for production, console for development",
    )
    stream: Any = Field(default=None, description="Text stream; sys.stdout when unset")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        return normalize_level(value) or value

    @field_validator("redact", mode="before")
    @classmethod
    def _paths_shorthand(cls, value: Any) -> Any:
        if isinstance(value, list | tuple):
            return {"paths": tuple(value)}
        return value
