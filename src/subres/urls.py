"""URL helpers: component extraction and entrypoint normalization."""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qsl, quote, urlsplit

from .errors import InputError

# Schemes with a host and a tuple origin, mapped to their default port
SPECIAL_SCHEMES: dict[str, int | None] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "file": None,
}

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

# Characters encodeURI leaves alone, minus "?" and "#" which are valid in file names
_PATH_SAFE = "/;,:@&=+$-_.!~*'()"


@dataclass(frozen=True)
class URLParts:
    """Browser-style view of an absolute URL.

    Attribute values follow the conventions of the DOM ``URL`` interface:
    ``protocol`` keeps its trailing colon, ``search`` and ``hash`` keep their
    leading marker (or are empty), default ports are omitted and non-web
    schemes have the opaque origin ``"null"`` (``blob:`` URLs take the
    origin of the web URL they wrap).
    """

    href: str
    protocol: str
    hostname: str
    port: str
    pathname: str
    search: str
    hash: str
    search_params: tuple[tuple[str, str], ...]

    @classmethod
    def parse(cls, url: str) -> "URLParts":
        parts = urlsplit(url)
        scheme = parts.scheme.lower()

        hostname = parts.hostname or ""
        if ":" in hostname:
            hostname = f"[{hostname}]"

        try:
            port_number = parts.port
        except ValueError:
            port_number = None
        port = ""
        if port_number is not None and port_number != SPECIAL_SCHEMES.get(scheme):
            port = str(port_number)

        pathname = parts.path
        if not pathname and scheme in SPECIAL_SCHEMES:
            pathname = "/"

        return cls(
            href=url,
            protocol=f"{scheme}:",
            hostname=hostname,
            port=port,
            pathname=pathname,
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
            search_params=tuple(parse_qsl(parts.query, keep_blank_values=True)),
        )

    @property
    def scheme(self) -> str:
        return self.protocol[:-1]

    @property
    def host(self) -> str:
        return f"{self.hostname}:{self.port}" if self.port else self.hostname

    @property
    def origin(self) -> str:
        # blob: URLs inherit the origin of the URL they wrap
        if self.scheme == "blob":
            inner = URLParts.parse(self.pathname)
            return inner.origin if inner.scheme in ("http", "https") else "null"
        if self.scheme in SPECIAL_SCHEMES and self.scheme != "file" and self.hostname:
            return f"{self.protocol}//{self.host}"
        return "null"

    def get_param(self, name: str) -> str | None:
        """Return the first value of query parameter ``name``."""
        for key, value in self.search_params:
            if key == name:
                return value
        return None

    def params_dict(self) -> dict[str, str]:
        """Query parameters as an ordered dict; a repeated key keeps its last value."""
        return dict(self.search_params)


def is_absolute_url(value: str) -> bool:
    """Check whether ``value`` parses as an absolute URL.

    Single-letter schemes are rejected so Windows drive paths (``C:/x``)
    are not mistaken for URLs.
    """
    match = _SCHEME_RE.match(value)
    if not match or len(match.group(1)) < 2:
        return False

    scheme = match.group(1).lower()
    if scheme in SPECIAL_SCHEMES and scheme != "file":
        return bool(urlsplit(value).netloc)
    return True


def path_to_file_url(path: Path) -> str:
    """Convert an absolute filesystem path to a percent-encoded file:// URL."""
    posix = str(path).replace("\\", "/")
    if not posix.startswith("/"):
        posix = "/" + posix
    return "file://" + quote(posix, safe=_PATH_SAFE)


def normalize_entrypoint(url_or_file: str) -> str:
    """Turn the CLI argument into the URL to navigate to.

    Args:
        url_or_file: An absolute URL or a path to an existing file.

    Returns:
        The absolute URL.

    Raises:
        InputError: If the argument is neither a URL nor an existing path.
    """
    if is_absolute_url(url_or_file):
        return url_or_file

    path = Path(url_or_file)
    if not path.exists():
        raise InputError(f"ENOENT (No such file): {url_or_file}")

    return path_to_file_url(path.resolve())
