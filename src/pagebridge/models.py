"""Data models for response and element waits."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from pagebridge.errors import UnknownMode


class WaitMode(IntEnum):
    """Presence transition an element wait resolves on."""

    GONE = 1
    PRESENCE = 2

    @classmethod
    def coerce(cls, value: Any) -> WaitMode:
        """Return the matching mode or raise UnknownMode."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise UnknownMode(value) from None
        try:
            return cls(value)
        except ValueError:
            raise UnknownMode(value) from None

    @property
    def label(self) -> str:
        return "gone" if self is WaitMode.GONE else "presence"


@dataclass(frozen=True)
class CapturedResponse:
    """First response recorded by the page bridge for one API path."""

    uri: str
    status_code: int
    raw_payload: str

    @classmethod
    def from_tuple(cls, uri: str, value: Any) -> CapturedResponse | None:
        """Build from the page-side ``[statusCode, responseText]`` pair.

        Returns None for anything that is not a two-item sequence.
        """
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            return None
        status, text = value
        return cls(uri=uri, status_code=int(status), raw_payload=text if text is not None else "")

    @property
    def aborted(self) -> bool:
        return self.status_code == 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def failed(self) -> bool:
        return self.status_code >= 400


@dataclass(frozen=True)
class WaitRequest:
    """An immutable response wait over one or more target paths."""

    targets: tuple[str, ...]
    referer: str | None = None
    timeout_ms: int | None = None
    encoded: bool = False
    single: bool = False

    def __post_init__(self) -> None:
        if not self.targets:
            raise ValueError("A response wait needs at least one target")

    @classmethod
    def create(
        cls,
        targets: str | Iterable[str],
        referer: str | None = None,
        timeout_ms: int | None = None,
        encoded: bool = False,
    ) -> WaitRequest:
        """Accept a single path or an iterable of paths."""
        if isinstance(targets, str):
            return cls((targets,), referer, timeout_ms, encoded, single=True)
        return cls(tuple(targets), referer, timeout_ms, encoded, single=False)

    @property
    def has_deadline(self) -> bool:
        return bool(self.timeout_ms)


@dataclass(frozen=True)
class ElementQuery:
    """An immutable element presence wait."""

    locator: str
    mode: WaitMode = WaitMode.GONE
    timeout_ms: int = 0
    parent: Any = None
