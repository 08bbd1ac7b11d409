"""Header, query string and timing helpers for request logging."""

import time
from collections.abc import Iterable, Mapping

from starlette.datastructures import URL, QueryParams

from obskit.constants import REDACTED


def redact_headers(headers: Mapping[str, str], denylist: Iterable[str]) -> dict[str, str]:
    """Lower-case header names and mask the ones on the deny-list."""
    denied = frozenset(name.lower() for name in denylist)
    sanitized: dict[str, str] = {}
    for key, value in headers.items():
        lower_key = key.lower()
        sanitized[lower_key] = REDACTED if lower_key in denied else value
    return sanitized


def extract_query_params(url: str) -> dict[str, str]:
    """Return the query string of url as a flat mapping; the last value wins."""
    return dict(QueryParams(URL(url).query))


def format_duration(start_ns: int) -> float:
    """Milliseconds elapsed since a ``time.perf_counter_ns()`` reading."""
    return (time.perf_counter_ns() - start_ns) / 1_000_000


def extract_trace_id(traceparent: str | None) -> str | None:
    """Extract trace_id from W3C traceparent header.

    Format: version-trace_id-parent_id-trace_flags
    Example: 00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01

    Args:
        traceparent: W3C traceparent header value

    Returns:
        Extracted trace_id or None
    """
    if not traceparent:
        return None
    parts = traceparent.split("-")
    return parts[1] if len(parts) >= 2 else None
