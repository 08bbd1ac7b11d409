"""obskit: structured logging with bound context and request logging.

Provides a structlog-backed logger factory, context composition helpers,
error serialization and a Starlette/FastAPI middleware that logs each
request's lifecycle.
"""

from obskit.config.models import Formatters, LoggerOptions, RedactOptions
from obskit.constants import (
    DEFAULT_LEVEL,
    DEFAULT_REDACT_PATHS,
    LOG_LEVELS,
    LogLevel,
)
from obskit.context import (
    LogContext,
    attach_context,
    create_context_logger,
    generate_request_id,
    with_request_context,
    with_session_context,
    with_trace_context,
    with_user_context,
)
from obskit.errors import is_error_like, serialize_error
from obskit.exceptions import (
    ConfigurationError,
    InvalidLogLevelError,
    ObservabilityError,
)
from obskit.logger import (
    Logger,
    create_logger,
    default_logger,
    install_fatal_handlers,
)

__all__ = [
    # Logger
    "Logger",
    "create_logger",
    "default_logger",
    "install_fatal_handlers",
    # Options
    "LoggerOptions",
    "RedactOptions",
    "Formatters",
    # Context
    "LogContext",
    "attach_context",
    "create_context_logger",
    "generate_request_id",
    "with_request_context",
    "with_user_context",
    "with_session_context",
    "with_trace_context",
    # Errors
    "serialize_error",
    "is_error_like",
    "ObservabilityError",
    "ConfigurationError",
    "InvalidLogLevelError",
    # Constants
    "LOG_LEVELS",
    "DEFAULT_LEVEL",
    "DEFAULT_REDACT_PATHS",
    "LogLevel",
]
