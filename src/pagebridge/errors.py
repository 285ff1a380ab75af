"""Failures raised by response and element waits."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any


class WaitErrorCode(StrEnum):
    """Stable codes for programmatic handling of wait failures."""

    ABORTED = "ABORTED"
    HTTP_ERROR = "HTTP_ERROR"
    REFERER_MISMATCH = "REFERER_MISMATCH"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_MODE = "UNKNOWN_MODE"
    DECODE_ERROR = "DECODE_ERROR"
    STALE_REFERENCE = "STALE_REFERENCE"


class WaitError(Exception):
    """Base class for wait failures with a stable code."""

    code: WaitErrorCode

    def __init__(self, message: str, code: WaitErrorCode) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class AbortedTarget(WaitError):
    """The page reported status 0 for a target (request aborted)."""

    def __init__(self, target: str) -> None:
        super().__init__(f"Aborted: {target}!", WaitErrorCode.ABORTED)
        self.target = target


class HttpErrorTarget(WaitError):
    """A target completed with an HTTP error status."""

    def __init__(self, target: str, status_code: int) -> None:
        super().__init__(
            f"Status code for {target} is {status_code}!", WaitErrorCode.HTTP_ERROR
        )
        self.target = target
        self.status_code = status_code


class RefererMismatch(WaitError):
    """The page navigated away from the expected location during a wait."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Unexpected referer {actual}!", WaitErrorCode.REFERER_MISMATCH)
        self.expected = expected
        self.actual = actual


class ResponseTimeout(WaitError):
    """The deadline passed while some targets were still pending."""

    def __init__(self, pending: Sequence[str], timeout_ms: int) -> None:
        super().__init__(
            f"Wait response timed-out for {', '.join(pending)}!", WaitErrorCode.TIMEOUT
        )
        self.pending = list(pending)
        self.timeout_ms = timeout_ms


class UnknownMode(WaitError):
    """An element wait was requested with a mode outside WaitMode."""

    def __init__(self, mode: Any) -> None:
        super().__init__(f"Unknown element wait mode {mode!r}!", WaitErrorCode.UNKNOWN_MODE)
        self.mode = mode


class PayloadDecodeError(WaitError):
    """A captured response body could not be decoded."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(
            f"Unable to decode response for {target}: {reason}", WaitErrorCode.DECODE_ERROR
        )
        self.target = target
        self.reason = reason


class StaleReferenceError(WaitError):
    """A previously obtained element handle no longer refers to a live element.

    Raised by the driver. ElementWaiter recovers from it by resolving with the
    last known handle; other callers see it as a regular failure.
    """

    def __init__(self, locator: str | None = None) -> None:
        message = "Stale element reference"
        if locator:
            message = f"Stale element reference for {locator}"
        super().__init__(message, WaitErrorCode.STALE_REFERENCE)
        self.locator = locator
