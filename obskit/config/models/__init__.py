"""Configuration model exports.

    from obskit.config.models import LoggerOptions, MiddlewareOptions
"""

from obskit.config.models.logger import (
    Formatters,
    LoggerOptions,
    RedactOptions,
    default_serializers,
    label_level,
)
from obskit.config.models.middleware import (
    DEFAULT_REDACT_HEADERS,
    HeaderMode,
    HeaderPolicy,
    MiddlewareOptions,
)

__all__ = [
    "DEFAULT_REDACT_HEADERS",
    "Formatters",
    "HeaderMode",
    "HeaderPolicy",
    "LoggerOptions",
    "MiddlewareOptions",
    "RedactOptions",
    "default_serializers",
    "label_level",
]
