"""
LightSync Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from lightsync.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | [LightSync] {message} | {extra}"

_configured = False


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """
    Replace loguru's default handler with the LightSync stdout sink.

    Args:
        level: Minimum level (default from config)
        serialize: Emit JSON lines instead of the text format
    """
    global _configured
    logger.remove()
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=serialize,
    )
    _configured = True


def get_logger(**extra: Any):
    """Get the shared logger, configuring it on first use."""
    if not _configured:
        configure_logging()
    return logger.bind(**extra) if extra else logger


def log_event(message: str, extra: Optional[Dict[str, Any]] = None, level: str = "INFO") -> None:
    """Log a message with optional structured extra data."""
    get_logger(**(extra or {})).log(level, message)
