"""
Centralized Logger Service Module.

Usage:
    from entity_assets.services.logger import get_service_logger
    from entity_assets.enums import LoggerName, LogSource

    logger = get_service_logger(LoggerName.IMAGE_PIPELINE, LogSource.PIPELINE)
    logger.info("Saved derivative", extra_context={"path": path})
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import configure_logging, get_service_logger

__all__ = [
    "configure_logging",
    "get_service_logger",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
