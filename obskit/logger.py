"""Logger factory backed by structlog.

Provides JSON logging for production and console logging for development,
with bound context, per-field serializers and redaction of sensitive keys.

Usage:
    from obskit import create_logger

    logger = create_logger(level="debug", base={"service": "billing"})
    logger.info("Invoice created", invoice_id=invoice.id)

    request_logger = logger.with_context({"requestId": "req_1"})
"""

import asyncio
import os
import sys
import threading
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

import structlog
from pydantic import ValidationError
from structlog import BoundLoggerBase, DropEvent, PrintLogger
from structlog.typing import Processor

from obskit.config.models import LoggerOptions
from obskit.constants import (
    DEFAULT_ERROR_KEY,
    DEFAULT_LEVEL,
    DEFAULT_TIMESTAMP_KEY,
    LEVEL_ALIASES,
    LOG_LEVELS,
)
from obskit.context import attach_context
from obskit.exceptions import ConfigurationError, InvalidLogLevelError
from obskit.processors import (
    CustomTimestamp,
    FormatLevel,
    Redactor,
    RenameMessage,
    SerializeFields,
)


def _resolve_level(level: str) -> str:
    name = LEVEL_ALIASES.get(level, level)
    if name not in LOG_LEVELS:
        raise InvalidLogLevelError(level)
    return name


class Logger(BoundLoggerBase):
    """Structured logger with an immutable bound context and a minimum level.

    Calls below the minimum level return before any processor runs. Binding
    (``bind``, ``child``, ``with_context``) always returns a new logger.
    """

    def __init__(
        self,
        logger: Any,
        processors: list[Processor],
        context: dict[str, Any],
        *,
        level: str = DEFAULT_LEVEL,
        error_key: str = DEFAULT_ERROR_KEY,
    ) -> None:
        super().__init__(logger, processors, context)
        self._level = _resolve_level(level)
        self._min_level = LOG_LEVELS[self._level]
        self._error_key = error_key

    def __repr__(self) -> str:
        return f"<Logger(level={self._level!r}, context={self._context!r})>"

    @property
    def level(self) -> str:
        return self._level

    def is_level_enabled(self, level: str) -> bool:
        return LOG_LEVELS[_resolve_level(level)] >= self._min_level

    def _derive(self, context: dict[str, Any]) -> "Logger":
        return self.__class__(
            self._logger,
            self._processors,
            context,
            level=self._level,
            error_key=self._error_key,
        )

    def bind(self, **new_values: Any) -> "Logger":
        """Return a new logger with new_values added to the context."""
        return self._derive({**self._context, **new_values})

    def new(self, **new_values: Any) -> "Logger":
        """Return a new logger whose context is exactly new_values."""
        return self._derive(dict(new_values))

    def child(self, bindings: Mapping[str, Any]) -> "Logger":
        return self.bind(**bindings)

    def with_context(self, context: Mapping[str, Any]) -> "Logger":
        return attach_context(self, context)

    def log(self, level: str, event: Any, /, **fields: Any) -> None:
        """Emit one entry at level.

        An exception passed as event is stored under the error key and its
        text becomes the message.
        """
        name = _resolve_level(level)
        if LOG_LEVELS[name] < self._min_level:
            return
        if isinstance(event, BaseException):
            fields.setdefault(self._error_key, event)
            event = str(event) or type(event).__name__
        try:
            args, kwargs = self._process_event(name, event, fields)
        except DropEvent:
            return
        self._logger.msg(*args, **kwargs)

    def trace(self, event: Any, /, **fields: Any) -> None:
        self.log("trace", event, **fields)

    def debug(self, event: Any, /, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: Any, /, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warn(self, event: Any, /, **fields: Any) -> None:
        self.log("warn", event, **fields)

    def error(self, event: Any, /, **fields: Any) -> None:
        self.log("error", event, **fields)

    def fatal(self, event: Any, /, **fields: Any) -> None:
        self.log("fatal", event, **fields)

    def exception(self, event: Any, /, **fields: Any) -> None:
        """Log at error level with the exception being handled under ``err``."""
        fields.setdefault("err", sys.exc_info()[1])
        self.log("error", event, **fields)

    warning = warn
    critical = fatal


def resolve_options(
    options: LoggerOptions | Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> LoggerOptions:
    """Merge options and overrides over the defaults and validate them.

    Raises:
        ConfigurationError: If the merged options are invalid
    """
    if isinstance(options, LoggerOptions):
        if not overrides:
            return options
        data = {name: getattr(options, name) for name in options.model_fields_set}
    else:
        data = dict(options or {})
    data.update(overrides or {})

    try:
        return LoggerOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid logger options: {exc}") from exc


def build_processors(options: LoggerOptions) -> list[Processor]:
    """Build the processor chain for the given options."""
    processors: list[Processor] = [
        SerializeFields(options.serializers),
        Redactor(
            options.redact.paths,
            remove=options.redact.remove,
            censor=options.redact.censor,
        ),
        FormatLevel(options.formatters.level),
    ]

    if callable(options.timestamp):
        processors.append(CustomTimestamp(options.timestamp, key=DEFAULT_TIMESTAMP_KEY))
    elif options.timestamp:
        processors.append(
            structlog.processors.TimeStamper(fmt="iso", utc=True, key=DEFAULT_TIMESTAMP_KEY)
        )

    if options.format == "json":
        processors.append(RenameMessage(options.message_key))
        processors.append(structlog.processors.JSONRenderer())
    else:
        # ConsoleRenderer reads the message from "event"
        processors.append(structlog.dev.ConsoleRenderer(colors=_isatty(options.stream)))

    return processors


def _isatty(stream: Any) -> bool:
    stream = stream or sys.stdout
    return bool(getattr(stream, "isatty", lambda: False)())


def create_logger(
    options: LoggerOptions | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> Logger:
    """Create a logger from options merged over the defaults.

    Args:
        options: LoggerOptions or a mapping of option keys (snake or camel case)
        **overrides: Individual options, applied on top of ``options``

    Returns:
        A Logger writing one record per call to the configured stream

    Raises:
        ConfigurationError: If the options are invalid
    """
    resolved = resolve_options(options, overrides)
    return Logger(
        PrintLogger(file=resolved.stream or sys.stdout),
        build_processors(resolved),
        dict(resolved.base or {}),
        level=resolved.level,
        error_key=resolved.error_key,
    )


default_logger = create_logger()

_fatal_handlers_installed = False


def install_fatal_handlers(
    logger: Logger | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
    exit_fn: Callable[[int], Any] = os._exit,
) -> None:
    """Log process-wide failures at fatal level, then exit with status 1.

    Installs ``sys.excepthook`` and ``threading.excepthook`` once per process.
    The asyncio exception handler is set on ``loop``, or on the running loop
    when called from a coroutine. Only loop contexts carrying an exception are
    fatal; message-only diagnostics go to the loop's default handler.

    Args:
        logger: Logger to report with; the default logger when omitted
        loop: Event loop whose unhandled task exceptions are fatal
        exit_fn: Called with the exit status after logging
    """
    global _fatal_handlers_installed

    fatal_logger = logger or default_logger

    if not _fatal_handlers_installed:
        previous_hook = sys.excepthook

        def handle_uncaught(
            exc_type: type[BaseException],
            exc: BaseException,
            tb: TracebackType | None,
        ) -> None:
            if issubclass(exc_type, KeyboardInterrupt):
                previous_hook(exc_type, exc, tb)
                return
            fatal_logger.fatal("Uncaught exception", err=exc)
            exit_fn(1)

        def handle_thread_exception(args: threading.ExceptHookArgs) -> None:
            if issubclass(args.exc_type, SystemExit):
                return
            fatal_logger.fatal(
                "Uncaught exception",
                err=args.exc_value,
                thread=args.thread.name if args.thread else None,
            )
            exit_fn(1)

        sys.excepthook = handle_uncaught
        threading.excepthook = handle_thread_exception
        _fatal_handlers_installed = True

    if loop is None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

    if loop is not None:

        def handle_async_exception(
            failed_loop: asyncio.AbstractEventLoop, context: dict[str, Any]
        ) -> None:
            error = context.get("exception")
            # Diagnostics without an exception (leaked tasks, unclosed sessions)
            if error is None:
                failed_loop.default_exception_handler(context)
                return
            fatal_logger.fatal("Unhandled async exception", err=error)
            exit_fn(1)

        loop.set_exception_handler(handle_async_exception)
