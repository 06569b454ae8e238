"""Logging setup and configuration."""

import logging
import sys
from pathlib import Path

from oauthflow.logging.context import set_log_context
from oauthflow.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_CONSOLE_LEVEL = logging.INFO
DEFAULT_FILE_LEVEL = logging.DEBUG

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "aiohttp.access",
    "aiohttp.client",
    "asyncio",
    "urllib3",
]


def setup_logging(
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    json_format: bool = False,
    log_file: Path | None = None,
    file_level: int = DEFAULT_FILE_LEVEL,
    provider: str | None = None,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Configure the root logger with a console handler and an optional file handler.

    Args:
        console_level: Console handler level (default: INFO)
        json_format: Use JSONFormatter on the console instead of ConsoleFormatter
        log_file: Optional path for a JSON-formatted log file
        file_level: File handler level (default: DEBUG)
        provider: Provider name stored in the log context
        suppress_noisy: Quiet down HTTP client loggers

    Returns:
        Configured root logger
    """
    if provider:
        set_log_context(provider=provider)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Use this instead of logging.getLogger() to ensure consistent naming.
    """
    return logging.getLogger(name)
