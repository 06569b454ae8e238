"""
Structured logging module.

Provides JSON and console logging with provider/grant context propagation
and redaction of credentials.
"""

from oauthflow.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from oauthflow.logging.formatters import ConsoleFormatter, JSONFormatter
from oauthflow.logging.setup import get_logger, setup_logging
from oauthflow.logging.utilities import log_exception, log_with_context

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Utilities
    "log_with_context",
    "log_exception",
]
