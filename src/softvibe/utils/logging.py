from __future__ import annotations

import logging
from typing import Any, Optional

import structlog

# HTTP client chatter that drowns out the app's own events at INFO.
NOISY_LOGGERS = ("httpx", "openai", "urllib3")


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Route stdlib logging and structlog events through one level and renderer.

    `json_output=True` emits one JSON object per event (for log shipping); otherwise events
    are rendered for a terminal. Safe to call more than once, later calls win.
    """
    number = _level_number(level)
    logging.basicConfig(level=number, format="%(message)s")
    logging.getLogger().setLevel(number)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(number, logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(number),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def get_logger(name: Optional[str] = None, **context: Any):
    """Lazy structlog logger for `name` carrying `context` on every event."""
    return structlog.get_logger(name, **context)
