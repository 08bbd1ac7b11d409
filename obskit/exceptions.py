"""Exception hierarchy for obskit.

All library errors inherit from ObservabilityError so callers can catch
configuration problems without catching unrelated failures.
"""


class ObservabilityError(Exception):
    """Base exception for all obskit errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ObservabilityError, ValueError):
    """Raised when logger or middleware options fail validation."""


class InvalidLogLevelError(ObservabilityError, ValueError):
    """Raised when a log call names a level that does not exist."""

    def __init__(self, level: str) -> None:
        super().__init__(f"Unknown log level: {level!r}")
        self.level = level
