"""Logging utility functions."""

import logging
from typing import Any

from oauthflow.errors.exceptions import OAuth2Error

# Reserved LogRecord attribute names that cannot be used in extra dict
_RESERVED_LOG_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """
    Log with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (provider, expires_at, etc.)
                  Note: exc_info=True is supported and handled specially.

    Example:
        log_with_context(
            logger, logging.INFO, "Tokens updated",
            provider=client.name,
            expires_at=client.expires_at,
        )
    """
    exc_info = kwargs.pop("exc_info", None)
    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}
    logger.log(level, msg, exc_info=exc_info, extra=extra)


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Automatically extracts error_category (and field_name, status code)
    from OAuth2Error subclasses.
    """
    extra: dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc)[:500],
    }

    if isinstance(exc, OAuth2Error):
        extra["error_category"] = exc.category.value
        field_name = getattr(exc, "field_name", None)
        if field_name:
            extra["field_name"] = field_name
        status_code = getattr(exc, "status_code", None)
        if status_code is not None:
            extra["http_status"] = status_code

    extra.update(kwargs)
    log_with_context(
        logger,
        level,
        msg,
        exc_info=exc if include_traceback else None,
        **extra,
    )
