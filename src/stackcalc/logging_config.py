"""
Logging configuration.

Sets up structlog for the whole package. Modules only ever call
``structlog.get_logger()``; this decides how those events are rendered.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """
    Configure structlog processors and the level filter.

    Args:
        level: Level name, e.g. "DEBUG" or "INFO".
        fmt: "console" for human readable output, "json" for one JSON
            object per line.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
