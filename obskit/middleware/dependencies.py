"""FastAPI dependency for the per-request logger."""

from typing import Annotated

from fastapi import Depends, Request

from obskit.logger import Logger, default_logger
from obskit.middleware.logging import LOGGER_STATE_KEY


def get_request_logger(request: Request) -> Logger:
    """Return the logger bound by ObservabilityMiddleware.

    Falls back to the default logger when the middleware is not installed,
    so handlers can always log.
    """
    return getattr(request.state, LOGGER_STATE_KEY, default_logger)


RequestLoggerDep = Annotated[Logger, Depends(get_request_logger)]
