from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from infinitylist.config import Config

PACKAGE_LOGGER = "infinitylist"


def setup_logging(config: Config) -> None:
    """Route infinitylist logs through structlog at the level ``config.debug`` selects.

    Safe to call more than once; the package logger level follows the latest config.
    """
    log_level = logging.DEBUG if config.debug else logging.INFO

    # No-op when the application already configured handlers
    logging.basicConfig(format="%(message)s")
    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)

    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer() if config.debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
