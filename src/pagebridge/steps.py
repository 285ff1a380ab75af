"""Step runner — ordered, conditional work lists driven by a sequential queue."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pagebridge.waiting.queue import SequentialQueue

Action = Callable[["StepContext"], Awaitable[Any] | Any]
Condition = Callable[["StepContext"], bool]


class StepContext:
    """Results of the steps run so far."""

    def __init__(self) -> None:
        self.results: list[Any] = []
        self.res: Any = None

    def get_res(self, index: int) -> Any:
        """Result of step ``index`` (None when the step was skipped)."""
        return self.results[index]


@dataclass(frozen=True)
class Step:
    """One unit of work, skipped when ``condition`` returns False."""

    action: Action
    condition: Condition | None = None

    @classmethod
    def of(cls, value: Step | Action | Sequence[Any]) -> Step:
        """Accept a Step, a bare callable or an ``(action, condition)`` pair."""
        if isinstance(value, Step):
            return value
        if callable(value):
            return cls(value)
        action, *rest = value
        return cls(action, rest[0] if rest else None)


async def run_steps(steps: Iterable[Step | Action | Sequence[Any]], delay_ms: int = 0) -> Any:
    """Run steps in order and return the result of the last executed one.

    Every executed step except the last is followed by a ``delay_ms`` pause
    before the next one starts. An exception from a step aborts the run.
    """
    items = [Step.of(step) for step in steps]
    context = StepContext()
    loop = asyncio.get_running_loop()
    queue: SequentialQueue[tuple[int, Step]]

    async def handle(item: tuple[int, Step]) -> None:
        index, step = item
        if step.condition is not None and not step.condition(context):
            context.results.append(None)
            queue.next()
            return

        result = step.action(context)
        if inspect.isawaitable(result):
            result = await result
        context.results.append(result)
        context.res = result

        if delay_ms > 0 and index < len(items) - 1:
            loop.call_later(delay_ms / 1000, queue.next)
        else:
            queue.next()

    queue = SequentialQueue(enumerate(items), handle, auto_advance=False)
    await queue.run()
    return context.res
