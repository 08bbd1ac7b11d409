"""Context composition: child loggers carrying bound fields.

Every helper returns a new logger and leaves its input untouched, so a
request-scoped child never leaks fields into the process-wide logger.

Usage:
    from obskit.context import with_request_context, with_user_context

    log = with_request_context(logger)
    log = with_user_context(log, user.id)
    log.info("Profile updated")
"""

import secrets
import string
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from obskit.logger import Logger

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_REQUEST_ID_SUFFIX_LENGTH = 13


class LogContext(TypedDict, total=False):
    """Conventional context keys. Any other key is allowed too."""

    requestId: str
    userId: str
    sessionId: str
    traceId: str


def attach_context(logger: "Logger", context: Mapping[str, Any]) -> "Logger":
    """Return a child of logger bound to context."""
    return logger.child(dict(context))


# Name kept for callers that think in terms of "context loggers"
create_context_logger = attach_context


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_request_id() -> str:
    """Generate an id of the form ``req_<unix millis>_<base36 suffix>``."""
    suffix = "".join(
        secrets.choice(_BASE36_ALPHABET) for _ in range(_REQUEST_ID_SUFFIX_LENGTH)
    )
    return f"req_{_now_ms()}_{suffix}"


def with_request_context(logger: "Logger", request_id: str | None = None) -> "Logger":
    """Bind ``requestId``, generating one when none is given."""
    return attach_context(logger, {"requestId": request_id or generate_request_id()})


def with_user_context(logger: "Logger", user_id: str) -> "Logger":
    return attach_context(logger, {"userId": user_id})


def with_session_context(logger: "Logger", session_id: str) -> "Logger":
    """Bind ``sessionId``.

    ``sessionId`` is one of the default redact paths, so the binding only
    reaches output when the logger was created with its own ``redact`` paths.
    """
    return attach_context(logger, {"sessionId": session_id})


def with_trace_context(logger: "Logger", trace_id: str) -> "Logger":
    return attach_context(logger, {"traceId": trace_id})
