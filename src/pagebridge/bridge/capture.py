"""Response capture bridge — page-side instrumentation of outbound API calls."""

from __future__ import annotations

from typing import Any

import logfire

from pagebridge.bridge.scripts import (
    build_call_script,
    build_install_script,
    build_read_script,
    build_reset_script,
)
from pagebridge.driver import PageDriver
from pagebridge.models import CapturedResponse

DEFAULT_NAMESPACE = "__pagebridge"


class ResponseCaptureBridge:
    """Injects XHR capture into the page and reads captured responses back.

    For each request whose path starts with ``api_prefix`` the page records
    ``[status, responseText]`` under ``window[namespace].responses[path]``.
    Only the first response per path is kept.
    """

    def __init__(self, api_prefix: str = "/api/", namespace: str = DEFAULT_NAMESPACE) -> None:
        self._api_prefix = api_prefix
        self._namespace = namespace
        self._accessors: dict[str, str] = {}
        self._read_script = build_read_script(namespace)
        self._reset_script = build_reset_script(namespace)
        self._call_script = build_call_script(namespace)

    @property
    def api_prefix(self) -> str:
        return self._api_prefix

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def accessors(self) -> list[str]:
        return list(self._accessors)

    def register_accessor(self, name: str, source: str) -> None:
        """Register a named read accessor (JavaScript function source).

        Accessors are injected by the next :meth:`install`.
        """
        if not name or not source.strip():
            raise ValueError("Accessor needs a name and a function source")
        self._accessors[name] = source

    def install_script(self) -> str:
        """Script text installing the capture hook and registered accessors."""
        return build_install_script(self._namespace, self._api_prefix, self._accessors)

    async def install(self, driver: PageDriver) -> None:
        """Install for future documents and for the currently loaded one.

        Safe to call repeatedly: the page-side hook is guarded by a marker on
        the XHR prototype.
        """
        script = self.install_script()
        await driver.add_init_script(script)
        await driver.evaluate(script)
        logfire.info(
            "Response capture installed",
            namespace=self._namespace,
            api_prefix=self._api_prefix,
            accessors=self.accessors,
        )

    async def read(self, driver: PageDriver, path: str) -> CapturedResponse | None:
        """Return the first captured response for ``path``, if any."""
        value = await driver.evaluate(self._read_script, path)
        return CapturedResponse.from_tuple(path, value)

    async def reset(self, driver: PageDriver) -> None:
        """Forget every response captured in the current document."""
        await driver.evaluate(self._reset_script)

    async def call_accessor(self, driver: PageDriver, name: str, *args: Any) -> Any:
        """Invoke a registered accessor in the page and return its value."""
        if name not in self._accessors:
            raise KeyError(f"Accessor {name!r} is not registered")
        return await driver.evaluate(self._call_script, [name, list(args)])
