"""Stream the sub-resources a page requests while it loads.

Requests are intercepted as the browser issues them and pushed into a
buffer; the caller pulls them through an async iterator. The two sides meet
in ``CollectorState``: the interceptor appends and sets the readiness event,
the consumer clears the event and drains the whole buffer. Interception
never waits for the consumer, so a slow consumer cannot stall page loading.
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import AbstractAsyncContextManager, suppress
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from pydantic import ValidationError

from .browser import launch_browser
from .errors import EngineError, NavigationError
from .filters import IgnoreFilter
from .logging_config import get_logger
from .models import CollectorOptions, SubResource
from .scroll import scroll_page_to_bottom

logger = get_logger(__name__)

Launcher = Callable[..., AbstractAsyncContextManager[Any]]


@dataclass
class CollectorState:
    """Buffer shared by the request interceptor and the consuming iterator."""

    buffer: deque[SubResource] = field(default_factory=deque)
    ready: asyncio.Event = field(default_factory=asyncio.Event)
    completed: bool = False
    error: Exception | None = None

    def push(self, resource: SubResource) -> None:
        self.buffer.append(resource)
        self.ready.set()

    def drain(self) -> list[SubResource]:
        items = list(self.buffer)
        self.buffer.clear()
        return items

    def complete(self, error: Exception | None = None) -> None:
        """Mark the run finished, recording the failure if there was one."""
        if error is not None and self.error is None:
            self.error = error
        self.completed = True
        self.ready.set()


def _response_ok(response: Any) -> bool:
    # Local file responses carry status 0
    return response.ok or response.status == 0


class SubResourceCollector:
    """Loads a page and yields every request it makes, in request order."""

    def __init__(
        self,
        options: CollectorOptions | None = None,
        launcher: Launcher = launch_browser,
    ):
        """Initialize the collector.

        Args:
            options: Navigation and lazy-load options.
            launcher: Async context manager factory yielding a browser;
                called as ``launcher(headless=...)``.
        """
        self.options = options or CollectorOptions()
        self.launcher = launcher

    async def _on_route(self, state: CollectorState, log, route: Any, request: Any) -> None:
        """Record an intercepted request, then let it through."""
        try:
            resource = SubResource.from_request(request)
        except ValidationError as e:
            log.warning("unrecognized_request_url", request_url=request.url, error=str(e))
        else:
            state.push(resource)
            log.debug("request_intercepted", kind=resource.kind.value, request_url=resource.url[:100])

        try:
            await route.continue_()
        except EngineError as e:
            # The page can close while a late request is still being routed
            log.debug("route_continue_failed", request_url=request.url[:100], error=str(e))

    async def _drive(self, page: Any, url: str, state: CollectorState, log) -> None:
        """Navigate, scroll for lazy resources, then mark the state complete."""
        error: Exception | None = None
        try:
            log.info(
                "navigating_to_page",
                wait_until=self.options.wait_until,
                timeout_ms=self.options.timeout_ms,
            )
            response = await page.goto(
                url,
                wait_until=self.options.wait_until,
                timeout=self.options.timeout_ms,
            )
            if response is None:
                raise NavigationError(url)
            if not _response_ok(response):
                raise NavigationError(url, response.status)

            if self.options.lazy_load:
                await scroll_page_to_bottom(
                    page,
                    step_ratio=self.options.scroll_step_ratio,
                    delay_ms=self.options.scroll_delay_ms,
                )
        except Exception as e:
            log.warning("navigation_failed", error=str(e))
            error = e
        finally:
            state.complete(error)

    @staticmethod
    def _accepted(
        resources: Iterable[SubResource], ignore: IgnoreFilter | None
    ) -> Iterable[SubResource]:
        for resource in resources:
            if ignore and ignore(resource):
                continue
            yield resource

    async def stream(
        self,
        url: str,
        ignore: IgnoreFilter | None = None,
    ) -> AsyncIterator[SubResource]:
        """Yield sub-resources of ``url`` as the page requests them.

        The browser is closed when the stream ends, fails, or is abandoned.

        Args:
            url: Absolute URL to navigate to.
            ignore: Optional filter; matching resources are not yielded.

        Yields:
            Each intercepted request, in interception order.

        Raises:
            NavigationError: If navigation returned no response or a non-2xx
                status. Resources captured before the failure are yielded first.
            EngineError: If the browser engine failed.
        """
        log = logger.bind(url=url[:80])
        state = CollectorState()
        delivered = 0

        async with self.launcher(headless=self.options.headless) as browser:
            page = await browser.new_page()
            await page.route("**/*", partial(self._on_route, state, log))
            driver = asyncio.create_task(self._drive(page, url, state, log))

            try:
                while not state.completed:
                    await state.ready.wait()
                    state.ready.clear()
                    for resource in self._accepted(state.drain(), ignore):
                        delivered += 1
                        yield resource

                # Requests that arrived between the last wake-up and completion
                for resource in self._accepted(state.drain(), ignore):
                    delivered += 1
                    yield resource
            finally:
                if not driver.done():
                    driver.cancel()
                with suppress(asyncio.CancelledError):
                    await driver

        log.info("stream_complete", delivered=delivered, failed=state.error is not None)
        if state.error is not None:
            raise state.error


def get_subresources(
    url: str,
    options: CollectorOptions | None = None,
    ignore: IgnoreFilter | None = None,
    launcher: Launcher = launch_browser,
) -> AsyncIterator[SubResource]:
    """Stream the sub-resources of a page.

    Args:
        url: Absolute URL to load.
        options: Navigation and lazy-load options.
        ignore: Optional ignore filter.
        launcher: Browser launcher, mainly for tests.

    Returns:
        Async iterator of captured resources.
    """
    collector = SubResourceCollector(options=options, launcher=launcher)
    return collector.stream(url, ignore=ignore)


async def collect_subresources(
    url: str,
    options: CollectorOptions | None = None,
    ignore: IgnoreFilter | None = None,
    launcher: Launcher = launch_browser,
) -> list[SubResource]:
    """Load a page and return every sub-resource it requested."""
    return [
        resource
        async for resource in get_subresources(url, options=options, ignore=ignore, launcher=launcher)
    ]
