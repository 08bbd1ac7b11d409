"""Request logging middleware.

Logs every request exactly twice: once when it arrives and once when it
finishes, either completed or failed (cancellation counts as failed).
Requests slower than the configured threshold also get a warning entry.
"""

import asyncio
import time
from typing import Any

from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from obskit.config.models import MiddlewareOptions
from obskit.context import with_request_context, with_trace_context
from obskit.exceptions import ConfigurationError
from obskit.logger import Logger, create_logger
from obskit.middleware.utils import (
    extract_query_params,
    extract_trace_id,
    format_duration,
    redact_headers,
)

# request.state attribute holding the per-request logger
LOGGER_STATE_KEY = "logger"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware that gives each request its own logger and logs its lifecycle.

    The per-request logger carries ``requestId`` (taken from the request id
    header when present, generated otherwise) and ``traceId`` when the
    request carries one. Handlers retrieve it from ``request.state.logger``.

    Usage:
        app.add_middleware(
            ObservabilityMiddleware,
            include_headers=True,
            slow_request_threshold=500,
        )
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        logger: Logger | None = None,
        options: MiddlewareOptions | None = None,
        **option_kwargs: Any,
    ) -> None:
        super().__init__(app)
        self.options = _resolve_options(options, option_kwargs)
        if logger is None:
            logger = (
                create_logger(level=self.options.level)
                if self.options.level
                else create_logger()
            )
        self.logger = logger

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Log the request, run the downstream app and log the outcome."""
        options = self.options
        request_logger = self._request_logger(request)
        start = time.perf_counter_ns()

        request_logger.info("Incoming request", **self._request_payload(request))
        setattr(request.state, LOGGER_STATE_KEY, request_logger)

        try:
            response = await call_next(request)
        except (Exception, asyncio.CancelledError) as exc:
            duration = format_duration(start)
            status = _failure_status(exc)

            if options.format_error:
                error_payload = dict(options.format_error(exc, request))
            else:
                error_payload = {
                    "err": exc,
                    "duration": duration,
                    "status": status,
                    "method": request.method,
                    "path": request.url.path,
                }

            request_logger.error("Request failed", **error_payload)
            raise

        duration = format_duration(start)
        threshold = options.slow_request_threshold
        if duration > threshold:
            request_logger.warn(
                "Slow request detected",
                duration=duration,
                threshold=threshold,
            )

        if options.format_response:
            response_payload = dict(options.format_response(response, request))
        else:
            response_payload = {"status": response.status_code, "duration": duration}

        request_logger.info("Request completed", **response_payload)
        return response

    def _request_logger(self, request: Request) -> Logger:
        """Derive the per-request logger from the base logger."""
        options = self.options
        request_id = (
            request.headers.get(options.request_id_header)
            if options.request_id_header
            else None
        )
        request_logger = with_request_context(self.logger, request_id)

        trace_id = (
            request.headers.get(options.trace_id_header)
            if options.trace_id_header
            else None
        ) or extract_trace_id(request.headers.get("traceparent"))
        if trace_id:
            request_logger = with_trace_context(request_logger, trace_id)

        return request_logger

    def _request_payload(self, request: Request) -> dict[str, Any]:
        """Build the fields of the incoming-request entry."""
        options = self.options
        if options.format_request:
            return dict(options.format_request(request))

        url = str(request.url)
        payload: dict[str, Any] = {
            "method": request.method,
            "url": url,
            "path": request.url.path,
        }

        if options.include_headers.enabled:
            headers = redact_headers(dict(request.headers.items()), options.redact_headers)
            payload["headers"] = options.include_headers.select(headers)

        if options.include_query_params:
            payload["query"] = extract_query_params(url)

        if options.get_user_context:
            payload.update(options.get_user_context(request))

        return payload


def _resolve_options(
    options: MiddlewareOptions | None, option_kwargs: dict[str, Any]
) -> MiddlewareOptions:
    if options is not None and not option_kwargs:
        return options
    data = (
        {name: getattr(options, name) for name in options.model_fields_set}
        if options is not None
        else {}
    )
    data.update(option_kwargs)
    try:
        return MiddlewareOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid middleware options: {exc}") from exc


def _failure_status(exc: BaseException) -> int:
    """Status to report for a failed request: the error's own 4xx/5xx, else 500."""
    status = getattr(exc, "status_code", None)
    if not isinstance(status, int) or status < 400:
        return 500
    return status
