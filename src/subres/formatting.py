"""Output formatters for captured resources, one line per resource."""

import json
from collections.abc import Callable
from typing import Any

from .errors import ConfigurationError
from .models import SubResource

Formatter = Callable[[SubResource], str]

FORMATS = ("json", "json-short", "type-url", "url-only")
DEFAULT_FORMAT = "type-url"


def _dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def url_to_plain(resource: SubResource) -> dict[str, Any]:
    """Serialize the URL of a resource to its component dict."""
    url = resource.location
    return {
        "href": url.href,
        "protocol": url.protocol,
        "host": url.host,
        "port": url.port,
        "origin": url.origin,
        "pathname": url.pathname,
        "searchParams": url.params_dict(),
        "hash": url.hash,
    }


def format_json(resource: SubResource) -> str:
    return _dumps({"type": resource.kind.value, "url": url_to_plain(resource)})


def format_json_short(resource: SubResource) -> str:
    return _dumps({"type": resource.kind.value, "url": resource.url})


def format_type_url(resource: SubResource) -> str:
    return f"{resource.kind.value}\t{resource.url}"


def format_url_only(resource: SubResource) -> str:
    return resource.url


_FORMATTERS: dict[str, Formatter] = {
    "json": format_json,
    "json-short": format_json_short,
    "type-url": format_type_url,
    "url-only": format_url_only,
}


def get_formatter(name: str) -> Formatter:
    """Look up the formatter for an output format name.

    Raises:
        ConfigurationError: If the format is unknown.
    """
    try:
        return _FORMATTERS[name]
    except KeyError:
        raise ConfigurationError(f"Invalid value for --format: {json.dumps(name)}") from None
