"""
structlog setup shared by applications embedding the schema generator.
"""
import logging
import sys

import structlog

from .config import LoggingConfig


def configure_logging(logging_config: LoggingConfig) -> structlog.stdlib.BoundLogger:
    """
    Configures stdlib logging and structlog from a LoggingConfig.

    Args:
        logging_config: Level, output format ("json" or "console") and optional file.

    Returns:
        A bound logger for the caller.

    Raises:
        ValueError: If the configured level is not a known logging level.
    """
    level = logging.getLevelName(logging_config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {logging_config.level}")

    if logging_config.file:
        handler: logging.Handler = logging.FileHandler(logging_config.file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(format="%(message)s", level=level, handlers=[handler], force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False) if logging_config.format.lower() == "console"
            else structlog.processors.JSONRenderer(sort_keys=True)
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logger = structlog.get_logger("mcp_schemagen")
    logger.debug("Logging configured.", logging_level=logging_config.level, logging_format=logging_config.format)
    return logger
