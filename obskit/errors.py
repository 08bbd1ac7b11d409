"""Error classification and serialization for log payloads."""

import traceback
from collections.abc import Mapping
from typing import Any

# Fields rendered explicitly by serialize_error
_RESERVED_FIELDS = frozenset({"name", "message", "stack"})


def is_error_like(value: Any) -> bool:
    """Return True if value should be logged as an error.

    Any exception instance qualifies, and so does any mapping carrying a
    ``message`` key, even when it is not semantically an error.
    """
    if isinstance(value, BaseException):
        return True
    return isinstance(value, Mapping) and "message" in value


def serialize_error(value: Any) -> dict[str, Any]:
    """Convert an error-like value into a plain mapping.

    The result always has ``type`` and ``message``, has ``stack`` when the
    error carries a non-empty traceback, and keeps every other own field of
    the error (e.g. a ``code`` set on a custom exception). Dunder entries such
    as ``__notes__`` are skipped. Values that are not error-like are
    stringified under ``error``.
    """
    if not is_error_like(value):
        return {"error": str(value)}

    if isinstance(value, BaseException):
        error_type = type(value).__name__
        message = getattr(value, "message", None)
        if not isinstance(message, str):
            message = str(value)
        stack = _format_stack(value)
        fields: Mapping[str, Any] = vars(value)
    else:
        error_type = value.get("name") or "Error"
        message = value["message"]
        stack = value.get("stack")
        fields = value

    serialized: dict[str, Any] = {"type": error_type, "message": message}
    if stack:
        serialized["stack"] = stack

    for key, field in fields.items():
        if key in _RESERVED_FIELDS or _is_dunder(key):
            continue
        serialized[key] = field

    return serialized


def _is_dunder(key: Any) -> bool:
    return isinstance(key, str) and key.startswith("__") and key.endswith("__")


def _format_stack(error: BaseException) -> str | None:
    """Render the traceback of a raised exception, or None if never raised."""
    if error.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))
