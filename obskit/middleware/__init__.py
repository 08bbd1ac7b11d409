"""HTTP middleware for request logging.

Exports the middleware, its options and the helpers it is built from.
"""

from obskit.config.models.middleware import (
    DEFAULT_REDACT_HEADERS,
    HeaderMode,
    HeaderPolicy,
    MiddlewareOptions,
)
from obskit.middleware.dependencies import RequestLoggerDep, get_request_logger
from obskit.middleware.logging import LOGGER_STATE_KEY, ObservabilityMiddleware
from obskit.middleware.utils import (
    extract_query_params,
    extract_trace_id,
    format_duration,
    redact_headers,
)

__all__ = [
    # Middleware
    "ObservabilityMiddleware",
    "LOGGER_STATE_KEY",
    # Options
    "MiddlewareOptions",
    "HeaderPolicy",
    "HeaderMode",
    "DEFAULT_REDACT_HEADERS",
    # Dependencies
    "get_request_logger",
    "RequestLoggerDep",
    # Utilities
    "redact_headers",
    "extract_query_params",
    "extract_trace_id",
    "format_duration",
]
