"""Request-logging middleware configuration models."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator
from pydantic.alias_generators import to_camel
from starlette.requests import Request
from starlette.responses import Response

from obskit.config.settings import normalize_level
from obskit.constants import LogLevel

DEFAULT_REDACT_HEADERS: frozenset[str] = frozenset({
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "x-auth-token",
})


class HeaderMode(str, Enum):
    """How request headers are included in the incoming-request entry."""

    DISABLED = "disabled"
    ALL = "all"
    ALLOWLIST = "allowlist"


@dataclass(frozen=True)
class HeaderPolicy:
    """Header inclusion policy: disabled, all headers, or an allow-list."""

    mode: HeaderMode = HeaderMode.DISABLED
    allowlist: frozenset[str] = frozenset()

    @classmethod
    def disabled(cls) -> "HeaderPolicy":
        return cls(HeaderMode.DISABLED)

    @classmethod
    def all(cls) -> "HeaderPolicy":
        return cls(HeaderMode.ALL)

    @classmethod
    def allow(cls, names: Iterable[str]) -> "HeaderPolicy":
        return cls(HeaderMode.ALLOWLIST, frozenset(name.lower() for name in names))

    @classmethod
    def from_option(cls, value: "bool | Iterable[str] | HeaderPolicy | None") -> "HeaderPolicy":
        """Build a policy from the ``include_headers`` option value."""
        if isinstance(value, HeaderPolicy):
            return value
        if value is None or value is False:
            return cls.disabled()
        if value is True:
            return cls.all()
        if isinstance(value, str):
            return cls.allow([value])
        return cls.allow(value)

    @property
    def enabled(self) -> bool:
        return self.mode is not HeaderMode.DISABLED

    def select(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Filter already-normalised headers according to the policy."""
        if self.mode is HeaderMode.DISABLED:
            return {}
        if self.mode is HeaderMode.ALL:
            return dict(headers)
        return {key: value for key, value in headers.items() if key in self.allowlist}


class MiddlewareOptions(BaseModel):
    """Options for ObservabilityMiddleware.

    Custom formatters fully replace the payload they format.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    level: LogLevel | None = Field(
        default=None,
        description="Level for the logger created when none is supplied",
    )
    include_headers: InstanceOf[HeaderPolicy] = Field(default_factory=HeaderPolicy.disabled)
    redact_headers: frozenset[str] = Field(default=DEFAULT_REDACT_HEADERS)
    include_query_params: bool = Field(default=False)
    slow_request_threshold: float = Field(
        default=1000,
        ge=0,
        description="Duration in milliseconds above which a warning is logged",
    )
    get_user_context: Callable[[Request], Mapping[str, Any]] | None = None
    format_request: Callable[[Request], Mapping[str, Any]] | None = None
    format_response: Callable[[Response, Request], Mapping[str, Any]] | None = None
    format_error: Callable[[BaseException, Request], Mapping[str, Any]] | None = None
    request_id_header: str | None = Field(
        default="x-request-id",
        description="Header holding a caller-supplied request id; None to always generate",
    )
    trace_id_header: str | None = Field(
        default="x-trace-id",
        description="Header holding a trace id; W3C traceparent is the fallback",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        return normalize_level(value) or value

    @field_validator("include_headers", mode="before")
    @classmethod
    def _header_policy(cls, value: Any) -> HeaderPolicy:
        return HeaderPolicy.from_option(value)

    @field_validator("redact_headers", mode="before")
    @classmethod
    def _lowercase_headers(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, Iterable):
            return frozenset(name.lower() for name in value)
        return value
