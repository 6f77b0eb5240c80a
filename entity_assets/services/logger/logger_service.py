# entity_assets/services/logger/logger_service.py
"""
Centralized Logger Service for entity assets.

Thin, type-safe layer over loguru:
- Enum-based logger names, sources and emojis
- Console sink with level colouring, optional rotating file sink
- Structured context attached to every record via ``bind``
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .constants import (
    CONSOLE_LOG_FORMAT,
    DEFAULT_EXTRA,
    FILE_LOG_FORMAT,
    FILE_RETENTION,
    FILE_ROTATION,
)


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[str] = None,
    colorize: Optional[bool] = None,
) -> None:
    """
    Install the console sink (and a rotating file sink when requested).

    Replaces every previously installed loguru handler, so it is safe to
    call again after settings change.

    Args:
        level: Minimum level written by every sink
        log_file: Optional path of a rotating log file
        colorize: Force colour on/off; None lets loguru detect a TTY
    """
    # records logged outside a service logger still render in our formats
    logger.configure(extra=dict(DEFAULT_EXTRA))
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.value,
        format=CONSOLE_LOG_FORMAT,
        colorize=colorize,
        backtrace=False,
        diagnose=False,
    )

    if log_file:
        logger.add(
            log_file,
            level=level.value,
            format=FILE_LOG_FORMAT,
            rotation=FILE_ROTATION,
            retention=FILE_RETENTION,
            encoding="utf-8",
            enqueue=True,
        )


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Returns a logger with simplified methods that automatically include the
    correct source and logger_name.

    Emoji priority system (highest to lowest):
    1. Direct: Emoji passed directly to log method call
    2. Instance-set: Default emoji set when creating the service logger
    3. Fallback: Default emoji based on log level (ERROR, WARNING, INFO, DEBUG)

    Args:
        logger_name: The logger name enum to use for all calls
        source: The log source enum to use for all calls (defaults to SYSTEM)
        default_emoji: Instance-level default emoji that overrides level-based fallbacks

    Returns:
        ServiceLogger instance with error, warning, info, debug methods

    Example:
        logger = get_service_logger(LoggerName.DELETION_SERVICE, LogSource.STORAGE)
        logger.info("Deleted asset", emoji=LogEmoji.DELETE)
    """
    bound = logger.bind(logger_name=logger_name.value, source=source.value)

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    def _emit(
        level: str,
        message: str,
        emoji: LogEmoji,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        record = bound.bind(context=context or {})
        if exception is not None:
            record = record.opt(exception=exception)
        record.log(level, f"{emoji.value} {message}")

    class ServiceLogger:
        name = logger_name

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            error_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ) -> None:
            """Log an error with emoji priority system."""
            _emit(
                LogLevel.ERROR.value,
                message,
                _resolve_emoji(emoji, LogEmoji.ERROR),
                error_context,
                exception,
            )

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ) -> None:
            """Log a warning with emoji priority system."""
            _emit(
                LogLevel.WARNING.value,
                message,
                _resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ) -> None:
            """Log an info message with emoji priority system."""
            _emit(
                LogLevel.INFO.value,
                message,
                _resolve_emoji(emoji, LogEmoji.INFO),
                extra_context,
            )

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ) -> None:
            """Log a debug message with emoji priority system."""
            _emit(
                LogLevel.DEBUG.value,
                message,
                _resolve_emoji(emoji, LogEmoji.DEBUG),
                extra_context,
            )

    return ServiceLogger()
