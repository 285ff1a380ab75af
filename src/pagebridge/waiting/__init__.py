"""Polling primitives for captured responses and DOM presence."""

from pagebridge.waiting.element_waiter import ElementWaiter
from pagebridge.waiting.queue import SequentialQueue
from pagebridge.waiting.response_waiter import ResponseWaiter
from pagebridge.waiting.ticker import PeriodicTicker

__all__ = [
    "ElementWaiter",
    "PeriodicTicker",
    "ResponseWaiter",
    "SequentialQueue",
]
