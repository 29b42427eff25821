"""Data models for captured sub-resources and collector options."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .urls import URLParts, is_absolute_url


class ResourceKind(str, Enum):
    """Category of an observed network request."""

    DOCUMENT = "document"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    IMAGE = "image"
    FONT = "font"
    MEDIA = "media"
    XHR = "xhr"
    FETCH = "fetch"
    WEBSOCKET = "websocket"
    EVENTSOURCE = "eventsource"
    MANIFEST = "manifest"
    OTHER = "other"

    @classmethod
    def from_engine(cls, resource_type: str | None) -> "ResourceKind":
        """Map a browser resource type (``texttrack``, ``ping``, ...) onto a kind."""
        try:
            return cls((resource_type or "").lower())
        except ValueError:
            return cls.OTHER


class SubResource(BaseModel):
    """A network request observed while loading a page."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    url: str

    @field_validator("url")
    @classmethod
    def _require_absolute(cls, value: str) -> str:
        if not is_absolute_url(value):
            raise ValueError(f"not an absolute URL: {value!r}")
        return value

    @classmethod
    def from_request(cls, request: Any) -> "SubResource":
        """Build a descriptor from an intercepted engine request."""
        return cls(kind=ResourceKind.from_engine(request.resource_type), url=request.url)

    @property
    def location(self) -> URLParts:
        return URLParts.parse(self.url)


WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]

# Readiness events accepted under older names
WAIT_UNTIL_ALIASES = {
    "networkidle0": "networkidle",
    "networkidle2": "networkidle",
}


class CollectorOptions(BaseModel):
    """Per-run options for the collector."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=20.0, ge=0)  # seconds, 0 disables
    wait_until: WaitUntil = "load"
    lazy_load: bool = True
    scroll_step_ratio: float = Field(default=0.8, gt=0)
    scroll_delay_ms: int = Field(default=20, ge=0)
    headless: bool = True

    @field_validator("wait_until", mode="before")
    @classmethod
    def _resolve_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return WAIT_UNTIL_ALIASES.get(value, value)
        return value

    @property
    def timeout_ms(self) -> float:
        return self.timeout * 1000

    @classmethod
    def validated(cls, **values: Any) -> "CollectorOptions":
        """Construct options, reporting invalid values as ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'options'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid options: {problems}") from e
