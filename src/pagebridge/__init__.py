"""pagebridge — programmatic access to UI-only web applications."""

from pagebridge.bridge import ResponseCaptureBridge, decode_payload, encode_payload
from pagebridge.core import Settings, configure_logging, get_settings
from pagebridge.driver import PageDriver, PlaywrightDriver
from pagebridge.errors import (
    AbortedTarget,
    HttpErrorTarget,
    PayloadDecodeError,
    RefererMismatch,
    ResponseTimeout,
    StaleReferenceError,
    UnknownMode,
    WaitError,
    WaitErrorCode,
)
from pagebridge.models import CapturedResponse, ElementQuery, WaitMode, WaitRequest
from pagebridge.session import Session
from pagebridge.steps import Step, StepContext, run_steps
from pagebridge.waiting import ElementWaiter, PeriodicTicker, ResponseWaiter, SequentialQueue

__version__ = "0.1.0"

__all__ = [
    "AbortedTarget",
    "CapturedResponse",
    "ElementQuery",
    "ElementWaiter",
    "HttpErrorTarget",
    "PageDriver",
    "PayloadDecodeError",
    "PeriodicTicker",
    "PlaywrightDriver",
    "RefererMismatch",
    "ResponseCaptureBridge",
    "ResponseTimeout",
    "ResponseWaiter",
    "SequentialQueue",
    "Session",
    "Settings",
    "StaleReferenceError",
    "Step",
    "StepContext",
    "UnknownMode",
    "WaitError",
    "WaitErrorCode",
    "WaitMode",
    "WaitRequest",
    "configure_logging",
    "decode_payload",
    "encode_payload",
    "get_settings",
    "run_steps",
]
