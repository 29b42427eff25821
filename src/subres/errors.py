"""Exception types raised by the collector and CLI."""

from playwright.async_api import Error as EngineError


class SubresError(Exception):
    """Base class for errors raised by subres itself."""


class ConfigurationError(SubresError):
    """Invalid option (format, ignore filter, wait-until event, timeout).

    Always raised before any network activity.
    """


class InputError(SubresError):
    """The URL-or-file argument could not be resolved."""


class NavigationError(SubresError):
    """Navigation produced no response or a non-2xx status."""

    def __init__(self, url: str, status: int | None = None):
        reason = f". HTTP {status}" if status is not None else ""
        super().__init__(f"Failed to navigate to {url}{reason}")
        self.url = url
        self.status = status


__all__ = [
    "ConfigurationError",
    "EngineError",
    "InputError",
    "NavigationError",
    "SubresError",
]
