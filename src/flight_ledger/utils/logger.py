"""
Logging utilities
"""

import structlog
import logging
from typing import Optional
from ..config import config


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Route structlog through the standard library logger.

    Args:
        level: Level name such as "DEBUG"; defaults to LOGGING_LEVEL
        log_format: "json" or "text"; defaults to LOGGING_LOG_FORMAT
    """
    level_name = (level or config.logging.level).upper()
    log_level = getattr(logging, level_name, logging.WARNING)
    log_format = log_format or config.logging.log_format

    logging.basicConfig(format="%(message)s", level=log_level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
