"""Response waiter — polls the capture bridge until API responses arrive."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from typing import Any

import logfire

from pagebridge.bridge.capture import ResponseCaptureBridge
from pagebridge.bridge.codec import NO_PAYLOAD, decode_payload
from pagebridge.driver import PageDriver
from pagebridge.errors import AbortedTarget, HttpErrorTarget, RefererMismatch, ResponseTimeout
from pagebridge.models import WaitRequest
from pagebridge.waiting.queue import SequentialQueue
from pagebridge.waiting.ticker import PeriodicTicker

POLL_INTERVAL_MS = 100


class ResponseWaiter:
    """Waits for captured responses of one or more API paths.

    Fail-fast: an aborted target, an HTTP error, a referer mismatch or the
    deadline rejects the whole wait, whatever the state of other targets.
    """

    def __init__(
        self,
        driver: PageDriver,
        bridge: ResponseCaptureBridge,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        progress_interval_s: int = 5,
    ) -> None:
        self._driver = driver
        self._bridge = bridge
        self._poll_interval = poll_interval_ms / 1000
        self._progress_interval = progress_interval_s

    async def wait(
        self,
        targets: str | Iterable[str],
        *,
        referer: str | None = None,
        timeout_ms: int | None = None,
        encoded: bool = False,
    ) -> Any:
        """Wait for every target and return the decoded payload(s).

        A single path returns its payload; a list of paths returns payloads
        in request order.
        """
        return await self.wait_for(
            WaitRequest.create(targets, referer=referer, timeout_ms=timeout_ms, encoded=encoded)
        )

    async def wait_for(self, request: WaitRequest) -> Any:
        start = time.monotonic()
        ticker = PeriodicTicker(self._progress_interval, start=start)
        responses: dict[str, Any] = {}

        async def check(target: str) -> None:
            if request.referer:
                current = await self._driver.current_url()
                if current != request.referer:
                    raise RefererMismatch(request.referer, current)

            captured = await self._bridge.read(self._driver, target)
            if captured is None:
                return
            if captured.aborted:
                raise AbortedTarget(target)
            if captured.failed:
                raise HttpErrorTarget(target, captured.status_code)
            if captured.ok:
                payload = decode_payload(target, captured.raw_payload, request.encoded)
                if payload is not NO_PAYLOAD:
                    responses[target] = payload

        while True:
            pending = [t for t in request.targets if t not in responses]
            await SequentialQueue(pending, check).run()

            pending = [t for t in request.targets if t not in responses]
            if not pending:
                logfire.debug(
                    "Responses received",
                    targets=list(request.targets),
                    elapsed_ms=round((time.monotonic() - start) * 1000),
                )
                if request.single:
                    return responses[request.targets[0]]
                return [responses[t] for t in request.targets]

            elapsed_ms = (time.monotonic() - start) * 1000
            if request.has_deadline and elapsed_ms > request.timeout_ms:
                raise ResponseTimeout(pending, request.timeout_ms)

            ticker.tick(self._log_pending, pending)
            await asyncio.sleep(self._poll_interval)

    @staticmethod
    def _log_pending(pending: list[str]) -> None:
        logfire.debug("Still waiting response for {pending}", pending=pending)
