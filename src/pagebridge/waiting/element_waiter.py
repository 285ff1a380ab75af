"""Element waiter — polls the DOM until an element appears or disappears."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import logfire

from pagebridge.driver import PageDriver
from pagebridge.errors import StaleReferenceError
from pagebridge.models import ElementQuery, WaitMode
from pagebridge.waiting.ticker import PeriodicTicker

POLL_INTERVAL_MS = 50


class ElementWaiter:
    """Waits for a locator to reach a presence state.

    ``WaitMode.GONE`` resolves once a single match has been seen and a later
    poll finds none. ``WaitMode.PRESENCE`` resolves on the first poll that
    finds exactly one match. Timeouts resolve with the last known handle
    instead of failing, and a stale reference counts as gone.
    """

    def __init__(
        self,
        driver: PageDriver,
        default_timeout_ms: int = 30_000,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        progress_interval_s: int = 5,
    ) -> None:
        self._driver = driver
        self._default_timeout_ms = default_timeout_ms
        self._poll_interval = poll_interval_ms / 1000
        self._progress_interval = progress_interval_s

    async def wait(
        self,
        locator: str,
        *,
        mode: WaitMode | int | str = WaitMode.GONE,
        timeout_ms: int | None = None,
        parent: Any = None,
    ) -> Any:
        """Wait for ``locator`` and return the matched handle (or None)."""
        query = ElementQuery(
            locator=locator,
            mode=WaitMode.coerce(mode),
            timeout_ms=self._default_timeout_ms if timeout_ms is None else timeout_ms,
            parent=parent,
        )
        return await self.wait_for(query)

    async def wait_for(self, query: ElementQuery) -> Any:
        mode = WaitMode.coerce(query.mode)
        start = time.monotonic()
        ticker = PeriodicTicker(self._progress_interval, start=start)
        last: Any = None
        seen = False

        while True:
            try:
                if query.parent is not None and await self._driver.is_stale(query.parent):
                    logfire.debug("Parent of {locator} is stale, resolving", locator=query.locator)
                    return last
                matches = await self._driver.find_elements(query.locator, query.parent)
            except StaleReferenceError:
                logfire.warn("Stale on {locator}, resolving instead", locator=query.locator)
                return last

            match mode:
                case WaitMode.GONE:
                    if seen and not matches:
                        logfire.debug("Element {locator} now is gone", locator=query.locator)
                        return last
                case WaitMode.PRESENCE:
                    if not seen and len(matches) == 1:
                        logfire.debug("Element {locator} now is presence", locator=query.locator)
                        return matches[0]

            if len(matches) == 1 and not seen:
                seen = True
                last = matches[0]

            elapsed_ms = (time.monotonic() - start) * 1000
            if query.timeout_ms > 0 and elapsed_ms > query.timeout_ms:
                logfire.warn(
                    "Timed out waiting {locator} to be {state}, resolving anyway",
                    locator=query.locator,
                    state=mode.label,
                    seen=seen,
                )
                return last

            ticker.tick(self._log_waiting, query.locator, mode)
            await asyncio.sleep(self._poll_interval)

    @staticmethod
    def _log_waiting(locator: str, mode: WaitMode) -> None:
        logfire.debug("Still waiting {locator} to be {state}", locator=locator, state=mode.label)
