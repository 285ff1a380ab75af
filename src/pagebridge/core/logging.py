"""Logfire setup for automation sessions."""

from __future__ import annotations

import logfire

from pagebridge.core.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure logfire for console output, shipping spans only when a token is present."""
    settings = settings or get_settings()
    logfire.configure(
        service_name="pagebridge",
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=logfire.ConsoleOptions(min_log_level=settings.log_level),
    )
