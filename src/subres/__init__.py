"""subres - list every sub-resource a web page loads."""

__version__ = "0.1.0"

from .collector import (
    CollectorState,
    SubResourceCollector,
    collect_subresources,
    get_subresources,
)
from .errors import (
    ConfigurationError,
    EngineError,
    InputError,
    NavigationError,
    SubresError,
)
from .filters import IgnoreFilter, compile_filter
from .formatting import get_formatter
from .models import CollectorOptions, ResourceKind, SubResource
from .urls import URLParts, normalize_entrypoint

__all__ = [
    "CollectorOptions",
    "CollectorState",
    "ConfigurationError",
    "EngineError",
    "IgnoreFilter",
    "InputError",
    "NavigationError",
    "ResourceKind",
    "SubResource",
    "SubResourceCollector",
    "SubresError",
    "URLParts",
    "collect_subresources",
    "compile_filter",
    "get_formatter",
    "get_subresources",
    "normalize_entrypoint",
]
