"""Logging utilities for wktshapes."""

import logging
import sys

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "INFO", json: bool = False) -> structlog.stdlib.BoundLogger:
    """Configure structured logging on top of the standard library.

    Args:
        level: Logging level name for the root logger
        json: Render events as JSON lines instead of the console format

    Returns:
        Configured structlog logger for the package

    Raises:
        ValueError: If ``level`` is not one of ``LOG_LEVELS``
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"unknown log level '{level}', expected one of {', '.join(LOG_LEVELS)}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(getattr(logging, level))

    renderer = (structlog.processors.JSONRenderer() if json
                else structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("wktshapes")
    logger.debug("logging initialized", level=level)
    return logger
