"""Scroll a loaded page to the bottom to trigger lazy loading.

Images with ``loading="lazy"`` and intersection-observer based loaders only
request their resources once they approach the viewport, so a plain page
load misses them.
"""

import asyncio
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)

PAGE_METRICS_SCRIPT = """() => {
    const root = document.body || document.documentElement;
    const { scrollHeight, offsetHeight, clientHeight } = root;
    return {
        viewportHeight: window.innerHeight,
        scrollHeight: Math.max(scrollHeight, offsetHeight, clientHeight),
    };
}"""

SCROLL_BY_SCRIPT = "(step) => window.scrollBy(0, step)"


async def scroll_page_to_bottom(
    page: Any,
    step_ratio: float = 0.8,
    delay_ms: int = 20,
) -> int:
    """Scroll down in viewport-sized steps until the measured height is covered.

    The scrollable height is measured once before the first step.

    Args:
        page: The page to scroll.
        step_ratio: Fraction of the viewport height scrolled per step.
        delay_ms: Pause after each step for lazy loaders to react.

    Returns:
        Number of scroll steps performed.
    """
    metrics = await page.evaluate(PAGE_METRICS_SCRIPT)
    step = metrics["viewportHeight"] * step_ratio
    available = metrics["scrollHeight"]

    if step <= 0:
        logger.debug("lazy_load_skipped", viewport_height=metrics["viewportHeight"])
        return 0

    scrolled = 0.0
    steps = 0
    while True:
        await page.evaluate(SCROLL_BY_SCRIPT, step)
        scrolled += step
        steps += 1
        await asyncio.sleep(delay_ms / 1000)
        if scrolled >= available:
            break

    logger.debug("lazy_load_complete", steps=steps, scroll_height=available)
    return steps
