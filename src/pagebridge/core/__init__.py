"""Core pagebridge configuration."""

from pagebridge.core.config import Settings, get_settings
from pagebridge.core.logging import configure_logging

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
]
