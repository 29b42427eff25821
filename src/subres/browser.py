"""Browser acquisition for a single collection run."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Browser, async_playwright

from .logging_config import get_logger

logger = get_logger(__name__)


def get_browser_endpoint() -> str | None:
    """Get a remote CDP endpoint from environment."""
    # Check for custom endpoint
    endpoint = os.environ.get("SUBRES_BROWSER_ENDPOINT")
    if endpoint:
        return endpoint

    # Check for Browserless API key
    api_key = os.environ.get("BROWSERLESS_API_KEY")
    if api_key:
        return f"wss://chrome.browserless.io?token={api_key}"

    return None


@asynccontextmanager
async def launch_browser(headless: bool = True) -> AsyncIterator[Browser]:
    """Launch Chromium (or connect to a remote one) and close it on exit.

    The browser is closed exactly once, whether the body returns, raises, or
    is cancelled.

    Args:
        headless: Whether to run a local browser in headless mode.

    Yields:
        The connected browser.
    """
    endpoint = get_browser_endpoint()

    async with async_playwright() as p:
        if endpoint:
            logger.info("connecting_remote_browser")
            browser = await p.chromium.connect_over_cdp(endpoint)
        else:
            logger.info("launching_browser", headless=headless)
            browser = await p.chromium.launch(headless=headless)

        try:
            yield browser
        finally:
            await browser.close()
            logger.debug("browser_closed")
