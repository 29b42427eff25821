"""Command-line entry point: ``subres <urlOrFile>``."""

import argparse
import asyncio
import sys
from contextlib import aclosing

from . import __version__
from .collector import get_subresources
from .filters import IgnoreFilter
from .formatting import DEFAULT_FORMAT, FORMATS, get_formatter
from .logging_config import get_logger
from .models import CollectorOptions
from .urls import normalize_entrypoint

logger = get_logger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="subres",
        description="List every sub-resource a web page loads.",
    )
    parser.add_argument("url_or_file", metavar="urlOrFile", help="URL or path of the page to load")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--timeout",
        type=float,
        default=20,
        help="Timeout (in seconds) for navigation (default: 20, 0 disables)",
    )
    parser.add_argument(
        "--wait-until",
        default="load",
        help="Navigation readiness event: load, domcontentloaded, networkidle or commit (default: load)",
    )
    parser.add_argument(
        "--format",
        default=DEFAULT_FORMAT,
        help=f"Output format: {', '.join(FORMATS)} (default: {DEFAULT_FORMAT})",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="SPEC",
        help="Ignore if same-origin, different-origin or field has a value (repeatable)",
    )
    parser.add_argument(
        "--no-scroll",
        action="store_true",
        help="Do not scroll the page to trigger lazy-loaded resources",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Run the browser with visible UI",
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    """Validate the arguments, then print one line per captured resource.

    Everything that can be rejected is rejected before the browser starts.
    """
    url = normalize_entrypoint(args.url_or_file)
    options = CollectorOptions.validated(
        timeout=args.timeout,
        wait_until=args.wait_until,
        lazy_load=not args.no_scroll,
        headless=not args.headful,
    )
    format_output = get_formatter(args.format)
    ignore = IgnoreFilter.compile(url, args.ignore)

    # Close the stream (and the browser) as soon as printing stops
    async with aclosing(get_subresources(url, options=options, ignore=ignore)) as resources:
        async for resource in resources:
            print(format_output(resource), flush=True)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return asyncio.run(run(args))
    except Exception as e:
        logger.debug("run_failed", error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
