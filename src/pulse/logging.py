"""Logging configuration for hook processes.

Hooks print their summary on stdout, so structlog is routed through stdlib
logging to stderr only. Every event of one invocation carries the hook name
as a context variable, which keeps interleaved stderr from concurrent hooks
attributable.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from pulse.config import PulseSettings


def configure_logging(
    log_level: str = "WARNING",
    log_format: str = "console",
    hook_name: str | None = None,
) -> None:
    """Configure structlog for a hook or CLI process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "console" for key=value lines, "json" for JSON lines;
            anything else falls back to console
        hook_name: Bound as ``hook`` on every event when given
    """
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    # No-op when the root logger already has handlers (e.g. under pytest)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ])
    else:
        # stderr of a hook is captured by the host, not a terminal
        processors.append(structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "event", "hook"],
            drop_missing=True,
        ))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog.contextvars.clear_contextvars()
    if hook_name:
        structlog.contextvars.bind_contextvars(hook=hook_name)


def configure_from_settings(settings: PulseSettings, hook_name: str | None = None) -> None:
    """Configure logging from ``PULSE_LOG_LEVEL`` / ``PULSE_LOG_FORMAT`` settings."""
    configure_logging(settings.log_level, settings.log_format, hook_name=hook_name)
