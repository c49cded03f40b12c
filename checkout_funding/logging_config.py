"""Logging setup for applications hosting the funding engine.

Library modules only call logging.getLogger(__name__); the host calls
configure_logging() once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog

from checkout_funding.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging and the structlog stdlib pipeline.

    The level defaults to settings.log_level (LOG_LEVEL in the environment).
    """
    level = level or settings.log_level
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
