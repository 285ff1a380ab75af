"""Driver adapter — the browser commands the wait/capture core depends on."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import logfire
from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from pagebridge.errors import StaleReferenceError

# Playwright error fragments meaning the handle no longer maps to a live node
_STALE_MARKERS = (
    "not attached",
    "has been disposed",
    "execution context was destroyed",
)


@runtime_checkable
class PageDriver(Protocol):
    """Browser commands used by the waiters, the bridge and the session."""

    async def current_url(self) -> str: ...

    async def goto(self, url: str) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def add_init_script(self, script: str) -> None: ...

    async def find_elements(self, locator: str, parent: Any = None) -> list[Any]: ...

    async def is_stale(self, handle: Any) -> bool: ...


def is_stale_error(error: BaseException) -> bool:
    """Check whether a Playwright error reports a detached or disposed element."""
    message = str(error).lower()
    return any(marker in message for marker in _STALE_MARKERS)


class PlaywrightDriver:
    """PageDriver over a Playwright async Page.

    The page does not tolerate overlapping commands from several waiters, so
    every command runs under one lock.
    """

    def __init__(self, page: Page, navigation_wait: str = "load") -> None:
        self._page = page
        self._wait_until = navigation_wait
        self._lock = asyncio.Lock()

    @property
    def page(self) -> Page:
        return self._page

    async def current_url(self) -> str:
        async with self._lock:
            return self._page.url

    async def goto(self, url: str) -> None:
        async with self._lock:
            logfire.info("Opening page", url=url)
            await self._page.goto(url, wait_until=self._wait_until)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        async with self._lock:
            return await self._page.evaluate(script, arg)

    async def add_init_script(self, script: str) -> None:
        async with self._lock:
            await self._page.add_init_script(script=script)

    async def find_elements(self, locator: str, parent: ElementHandle | None = None) -> list[Any]:
        async with self._lock:
            root = parent if parent is not None else self._page
            try:
                return await root.query_selector_all(locator)
            except PlaywrightError as e:
                # Only a parent handle can go stale; page-level errors propagate
                if parent is not None and is_stale_error(e):
                    raise StaleReferenceError(locator) from e
                raise

    async def is_stale(self, handle: ElementHandle) -> bool:
        async with self._lock:
            try:
                connected = await handle.evaluate("el => el.isConnected")
            except PlaywrightError as e:
                if is_stale_error(e):
                    return True
                raise
            return not connected
