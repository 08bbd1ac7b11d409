"""Level table and default field names shared across obskit."""

from typing import Literal

LogLevel = Literal["fatal", "error", "warn", "info", "debug", "trace"]

LOG_LEVELS: dict[str, int] = {
    "fatal": 60,
    "error": 50,
    "warn": 40,
    "info": 30,
    "debug": 20,
    "trace": 10,
}

# Aliases accepted by Logger.log for stdlib-style level names
LEVEL_ALIASES: dict[str, str] = {
    "warning": "warn",
    "critical": "fatal",
}

DEFAULT_LEVEL: LogLevel = "info"

DEFAULT_REDACT_PATHS: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "credentials",
    "apiKey",
    "authorization",
    "cookie",
    "sessionId",
)

REDACTED = "[REDACTED]"

DEFAULT_TIMESTAMP_KEY = "timestamp"

DEFAULT_LEVEL_KEY = "level"

DEFAULT_MESSAGE_KEY = "msg"

DEFAULT_ERROR_KEY = "error"
