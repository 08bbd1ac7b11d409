"""structlog processors used by the obskit logger.

Each processor takes ``(logger, method_name, event_dict)`` and returns the
event dict for the next one. ``method_name`` is always an obskit level name
(``trace`` .. ``fatal``).
"""

from collections.abc import Callable, Iterable, Mapping, MutableMapping
from typing import Any

from structlog.typing import EventDict, WrappedLogger

from obskit.constants import LOG_LEVELS, REDACTED


class SerializeFields:
    """Apply per-field serializers, e.g. turning an exception into a mapping."""

    def __init__(self, serializers: Mapping[str, Callable[[Any], Any]]) -> None:
        self._serializers = dict(serializers)

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        for key, serializer in self._serializers.items():
            if key in event_dict:
                event_dict[key] = serializer(event_dict[key])
        return event_dict


class Redactor:
    """Processor that strips sensitive fields from log events.

    Two kinds of paths:
    1. Plain names (``password``) match the key at any depth, case-insensitively
    2. Dotted paths (``user.password``) match one exact location from the root

    Matches are dropped when ``remove`` is set, otherwise masked with ``censor``.
    Values already masked upstream (``[REDACTED]``, as written by
    ``redact_headers``) are kept so the output shows the field was present.
    Nested containers are copied, so payload objects owned by the caller are
    never modified.
    """

    def __init__(
        self,
        paths: Iterable[str],
        remove: bool = True,
        censor: str = REDACTED,
    ) -> None:
        paths = tuple(paths)
        self._keys = frozenset(path.lower() for path in paths if "." not in path)
        self._paths = tuple(tuple(path.split(".")) for path in paths if "." in path)
        self._remove = remove
        self._censor = censor

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        """Redact sensitive fields from the event dictionary."""
        redacted = self._redact_dict(event_dict)
        for path in self._paths:
            self._redact_path(redacted, path)
        return redacted

    def _redact_dict(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Recursively redact matching keys from a mapping."""
        result: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in self._keys:
                if not self._remove:
                    result[key] = self._censor
                elif _is_masked(value):
                    result[key] = value
                continue
            result[key] = self._redact_value(value)
        return result

    def _redact_value(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return self._redact_dict(value)
        if isinstance(value, list | tuple):
            return [self._redact_value(item) for item in value]
        return value

    def _redact_path(self, data: MutableMapping[str, Any], path: tuple[str, ...]) -> None:
        """Redact a single dotted path, if every segment exists."""
        *parents, leaf = path
        node: Any = data
        for segment in parents:
            if not isinstance(node, MutableMapping) or segment not in node:
                return
            node = node[segment]
        if not isinstance(node, MutableMapping) or leaf not in node:
            return
        if self._remove:
            if not _is_masked(node[leaf]):
                del node[leaf]
        else:
            node[leaf] = self._censor


def _is_masked(value: Any) -> bool:
    return isinstance(value, str) and value == REDACTED


class FormatLevel:
    """Add the fields describing the entry's level."""

    def __init__(self, formatter: Callable[[str, int], Mapping[str, Any]]) -> None:
        self._formatter = formatter

    def __call__(
        self,
        _logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.update(self._formatter(method_name, LOG_LEVELS[method_name]))
        return event_dict


class CustomTimestamp:
    """Add a timestamp produced by a caller-supplied factory."""

    def __init__(self, factory: Callable[[], Any], key: str = "timestamp") -> None:
        self._factory = factory
        self._key = key

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict[self._key] = self._factory()
        return event_dict


class RenameMessage:
    """Move structlog's ``event`` field to the configured message key."""

    def __init__(self, message_key: str) -> None:
        self._message_key = message_key

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        if self._message_key != "event" and "event" in event_dict:
            event_dict[self._message_key] = event_dict.pop("event")
        return event_dict
