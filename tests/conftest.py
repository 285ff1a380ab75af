"""Shared fixtures: a scripted in-memory page driver."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

import pytest

from pagebridge.bridge.capture import ResponseCaptureBridge
from pagebridge.core.config import Settings
from pagebridge.errors import StaleReferenceError


class FakeDriver:
    """PageDriver double driven by per-call scripts.

    ``captures[path]`` is a list of values returned by successive reads of
    that path (the last value repeats). ``elements[locator]`` works the same
    way for find_elements; an exception instance in a script is raised.
    """

    def __init__(self, url: str = "https://app.example.com/home") -> None:
        self.url = url
        self.captures: dict[str, list[Any]] = {}
        self.elements: dict[str, list[Any]] = {}
        self.stale: set[Any] = set()
        self.reads: list[str] = []
        self.find_calls: list[tuple[str, Any]] = []
        self.evaluated: list[tuple[str, Any]] = []
        self.init_scripts: list[str] = []
        self.visited: list[str] = []
        self._counts: dict[str, int] = defaultdict(int)

    @staticmethod
    def _next(script: list[Any], index: int) -> Any:
        if not script:
            return None
        value = script[min(index, len(script) - 1)]
        if isinstance(value, BaseException):
            raise value
        return value

    async def current_url(self) -> str:
        return self.url

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        self.url = url

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if "getApiResponse" in script and isinstance(arg, str):
            self.reads.append(arg)
            index = self._counts[arg]
            self._counts[arg] += 1
            return self._next(self.captures.get(arg, []), index)
        self.evaluated.append((script, arg))
        return None

    async def add_init_script(self, script: str) -> None:
        self.init_scripts.append(script)

    async def find_elements(self, locator: str, parent: Any = None) -> list[Any]:
        self.find_calls.append((locator, parent))
        key = f"find:{locator}"
        index = self._counts[key]
        self._counts[key] += 1
        return list(self._next(self.elements.get(locator, []), index) or [])

    async def is_stale(self, handle: Any) -> bool:
        if isinstance(handle, BaseException):
            raise handle
        return handle in self.stale


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def bridge() -> ResponseCaptureBridge:
    return ResponseCaptureBridge()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        base_url="https://app.example.com",
        wait_ms=200,
        delay_ms=0,
        opdelay_ms=1,
    )


@pytest.fixture
def stale_error() -> StaleReferenceError:
    return StaleReferenceError("#spinner")
