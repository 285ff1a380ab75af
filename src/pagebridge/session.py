"""Session façade — wires the driver, capture bridge and waiters together."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any

import logfire
from playwright.async_api import Page

from pagebridge.bridge.capture import ResponseCaptureBridge
from pagebridge.core.config import Settings, get_settings
from pagebridge.driver import PageDriver, PlaywrightDriver
from pagebridge.models import WaitMode
from pagebridge.steps import Action, Step, run_steps
from pagebridge.waiting.element_waiter import ElementWaiter
from pagebridge.waiting.response_waiter import ResponseWaiter


class Session:
    """Owns one controlled page and exposes the wait/capture primitives."""

    WAIT_GONE = WaitMode.GONE
    WAIT_PRESENCE = WaitMode.PRESENCE

    def __init__(
        self,
        driver: PageDriver,
        settings: Settings | None = None,
        bridge: ResponseCaptureBridge | None = None,
    ) -> None:
        self._driver = driver
        self._settings = settings or get_settings()
        self._bridge = bridge or ResponseCaptureBridge(api_prefix=self._settings.api_prefix)
        self._responses = ResponseWaiter(
            driver,
            self._bridge,
            progress_interval_s=self._settings.progress_interval_s,
        )
        self._elements = ElementWaiter(
            driver,
            default_timeout_ms=self._settings.wait_ms,
            progress_interval_s=self._settings.progress_interval_s,
        )

    @classmethod
    def from_page(cls, page: Page, settings: Settings | None = None) -> Session:
        """Create a session over an already launched Playwright page."""
        return cls(PlaywrightDriver(page), settings=settings)

    @property
    def driver(self) -> PageDriver:
        return self._driver

    @property
    def bridge(self) -> ResponseCaptureBridge:
        return self._bridge

    @property
    def settings(self) -> Settings:
        return self._settings

    async def install_bridge(self) -> None:
        """Inject the response capture hook (call before navigating)."""
        await self._bridge.install(self._driver)

    async def open(self, url: str | None = None) -> None:
        """Navigate to ``url`` or the configured base URL."""
        target = url or self._settings.base_url
        if not target:
            raise ValueError("No URL given and PAGEBRIDGE_BASE_URL is not set")
        await self._driver.goto(target)

    async def works(self, steps: Iterable[Step | Action | Sequence[Any]]) -> Any:
        """Run steps in order, pausing ``delay_ms`` between them."""
        return await run_steps(steps, delay_ms=self._settings.delay_ms)

    async def wait_for_response(
        self,
        targets: str | Iterable[str],
        *,
        referer: str | None = None,
        timeout_ms: int | None = None,
        encoded: bool = False,
    ) -> Any:
        """Wait for captured API responses; see ResponseWaiter.wait()."""
        if timeout_ms is None:
            timeout_ms = self._settings.response_timeout_ms
        return await self._responses.wait(
            targets, referer=referer, timeout_ms=timeout_ms, encoded=encoded
        )

    async def wait_for_presence(
        self,
        locator: str,
        *,
        mode: WaitMode | int | str = WaitMode.GONE,
        time_ms: int | None = None,
        parent: Any = None,
    ) -> Any:
        """Wait for an element to appear or disappear; see ElementWaiter.wait()."""
        return await self._elements.wait(locator, mode=mode, timeout_ms=time_ms, parent=parent)

    async def reset_responses(self) -> None:
        await self._bridge.reset(self._driver)

    async def call_accessor(self, name: str, *args: Any) -> Any:
        """Invoke a named page accessor registered on the bridge."""
        return await self._bridge.call_accessor(self._driver, name, *args)

    async def scroll_to(self, top: int) -> None:
        await self._driver.evaluate("top => window.scrollTo(0, top)", int(top))

    async def sleep(self, ms: int | None = None) -> None:
        """Pause for ``ms`` or the configured operation delay."""
        delay = self._settings.opdelay_ms if ms is None else ms
        logfire.debug("Sleeping", ms=delay)
        await asyncio.sleep(delay / 1000)
