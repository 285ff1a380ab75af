"""Sequential queue — processes work items strictly one at a time."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Handler = Callable[[T], Awaitable[Any]]


class SequentialQueue(Generic[T]):
    """Runs an async handler over ordered items, one item at a time.

    The handler for the next item starts only after the current handler has
    returned and the queue has been advanced. With ``auto_advance`` (the
    default) returning from the handler advances the queue. Otherwise the
    handler, or a callback it scheduled, must call :meth:`next`.

    Handler exceptions propagate out of :meth:`run`; remaining items are not
    visited and the completion signal is not emitted.
    """

    def __init__(
        self,
        items: Iterable[T],
        handler: Handler[T],
        auto_advance: bool = True,
    ) -> None:
        self._items: list[T] = list(items)
        self._handler = handler
        self._auto_advance = auto_advance
        self._advance = asyncio.Event()
        self._done = asyncio.Event()
        self._done_callbacks: list[Callable[[], Any]] = []
        self._current: T | None = None
        self._processed = 0

    @property
    def current(self) -> T | None:
        """Item whose handler is running, or None when idle."""
        return self._current

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def done(self) -> asyncio.Event:
        """Set once every item has been processed."""
        return self._done

    def __len__(self) -> int:
        return len(self._items)

    def on_done(self, callback: Callable[[], Any]) -> None:
        """Register a callback invoked once, when all items are processed."""
        if self._done.is_set():
            callback()
        else:
            self._done_callbacks.append(callback)

    def next(self) -> None:
        """Advance to the next item (cooperative advance)."""
        self._advance.set()

    async def run(self) -> None:
        """Process all items in order and emit the completion signal."""
        for item in self._items:
            self._advance.clear()
            self._current = item
            await self._handler(item)
            self._processed += 1
            if self._auto_advance:
                self._advance.set()
            await self._advance.wait()
        self._current = None
        self._done.set()
        callbacks, self._done_callbacks = self._done_callbacks, []
        for callback in callbacks:
            callback()
