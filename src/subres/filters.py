"""Ignore filters compiled from ``--ignore`` specifications.

A specification is one of:

- ``same-origin`` / ``different-origin``: compare the resource origin with
  the entrypoint origin.
- ``<field>:<regex>``: search the regex in a URL component, the resource
  kind (``type``) or the fragment without ``#`` (``hash``).
- ``param:<name>=<regex>`` (alias ``query:``): search the regex in the first
  value of a query parameter, or in "" when the parameter is absent.

An empty regex defaults to ``.``, so ``host:`` ignores anything with a host.
"""

import re
from collections.abc import Callable, Iterable

from .errors import ConfigurationError
from .logging_config import get_logger
from .models import SubResource
from .urls import URLParts

logger = get_logger(__name__)

Predicate = Callable[[SubResource], bool]

DEFAULT_PATTERN = "."

URL_FIELD_EXTRACTORS: dict[str, Callable[[URLParts], str]] = {
    "host": lambda u: u.host,
    "pathname": lambda u: u.pathname,
    "protocol": lambda u: u.protocol,
    "origin": lambda u: u.origin,
    "port": lambda u: u.port,
    "search": lambda u: u.search,
    "hash": lambda u: u.hash[1:],
}

PARAM_FIELDS = ("param", "query")


def _compile_regex(pattern: str, spec: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern or DEFAULT_PATTERN)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex in --ignore filter {spec!r}: {e}") from e


def compile_filter(entrypoint: str, spec: str) -> Predicate:
    """Compile one ignore specification into a predicate.

    Args:
        entrypoint: The navigation target, origin reference for origin filters.
        spec: The raw specification string.

    Returns:
        A predicate returning True when a resource should be ignored.

    Raises:
        ConfigurationError: On an unknown field, a bad regex, or a param
            filter without a parameter name.
    """
    if spec == "same-origin":
        origin = URLParts.parse(entrypoint).origin
        return lambda sr: sr.location.origin == origin
    if spec == "different-origin":
        origin = URLParts.parse(entrypoint).origin
        return lambda sr: sr.location.origin != origin

    field, _, value = spec.partition(":")

    if field == "type":
        regex = _compile_regex(value, spec)
        return lambda sr: regex.search(sr.kind.value) is not None

    if field in URL_FIELD_EXTRACTORS:
        extract = URL_FIELD_EXTRACTORS[field]
        regex = _compile_regex(value, spec)
        return lambda sr: regex.search(extract(sr.location)) is not None

    if field in PARAM_FIELDS:
        name, _, pattern = value.partition("=")
        if not name:
            raise ConfigurationError(f"Missing parameter name in --ignore filter: {spec}")
        regex = _compile_regex(pattern, spec)
        return lambda sr: regex.search(sr.location.get_param(name) or "") is not None

    raise ConfigurationError(f"Invalid --ignore filter: {spec}")


class IgnoreFilter:
    """OR-combination of compiled ignore predicates."""

    def __init__(self, predicates: Iterable[Predicate] = ()):
        self.predicates = list(predicates)

    @classmethod
    def compile(cls, entrypoint: str, specs: str | Iterable[str] | None) -> "IgnoreFilter":
        """Compile every specification up front.

        Args:
            entrypoint: The navigation target URL.
            specs: One specification, several, or None.
        """
        if not specs:
            return cls()
        if isinstance(specs, str):
            specs = [specs]

        specs = list(specs)
        predicates = [compile_filter(entrypoint, spec) for spec in specs]
        logger.debug("ignore_filters_compiled", count=len(predicates), specs=specs)
        return cls(predicates)

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __call__(self, resource: SubResource) -> bool:
        return any(should_ignore(resource) for should_ignore in self.predicates)
