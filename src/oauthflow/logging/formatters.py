"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from oauthflow.logging.context import get_log_context

REDACTED = "[REDACTED]"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Credentials never reach the output: secret-bearing fields are replaced
    and URLs have their sensitive query parameters redacted.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Correlation
        "trace_id",
        "duration_ms",
        # HTTP
        "http_status",
        "http_method",
        "http_url",
        # Errors
        "error_category",
        "error_message",
        "error",
        "error_type",
        "field_name",
        # OAuth2
        "provider",
        "grant_type",
        "token_type",
        "expires_in",
        "expires_at",
        "force_update",
        "refresh_token_rotated",
        "state",
        # Secrets, always redacted when present
        "access_token",
        "refresh_token",
        "client_secret",
        "code",
    ]

    SECRET_FIELDS = frozenset({"access_token", "refresh_token", "client_secret", "code"})

    NUMERIC_FIELDS = {
        "duration_ms": float,
        "http_status": int,
        "expires_in": int,
    }

    # Fields that contain URLs and should be sanitized
    URL_FIELDS = ["http_url", "url"]

    # Pattern to match sensitive query parameters
    SENSITIVE_PARAMS_PATTERN = re.compile(
        r"([?&])(code|access_token|refresh_token|client_secret|token|secret|password)=[^&]*",
        re.IGNORECASE,
    )

    def _sanitize_url(self, url: str) -> str:
        return self.SENSITIVE_PARAMS_PATTERN.sub(rf"\1\2={REDACTED}", url)

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if key in self.SECRET_FIELDS:
            return REDACTED
        if key in self.URL_FIELDS and isinstance(value, str):
            return self._sanitize_url(value)
        return value

    def _ensure_type(self, field: str, value: Any) -> Any:
        """Coerce numeric fields, dropping values that fail to convert."""
        if field not in self.NUMERIC_FIELDS or value is None:
            return value

        try:
            return self.NUMERIC_FIELDS[field](value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, str]) -> None:
        for field, value in log_context.items():
            if value:
                log_entry[field] = value

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                typed_value = self._ensure_type(field, value)
                log_entry[field] = self._sanitize_value(field, typed_value)

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stacktrace": self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = self._base_log_entry(record)
        self._inject_context(log_entry, get_log_context())

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=_json_default, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    # ANSI color codes
    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        color = self.COLORS.get(record.levelno, "")
        if not self._use_colors or not color:
            return level_name
        return f"{color}{level_name}{self.RESET}"

    @staticmethod
    def _build_prefix(level_name: str, log_context: dict[str, str]) -> str:
        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            level_name,
        ]

        if log_context["provider"]:
            parts.append(f"[{log_context['provider']}]")
        if log_context["grant_type"]:
            parts.append(f"[{log_context['grant_type']}]")

        return " - ".join(parts)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()

        prefix = self._build_prefix(self._format_level_name(record), log_context)
        trace_id = getattr(record, "trace_id", None) or log_context.get("trace_id")
        message = record.getMessage()

        if trace_id:
            message = f"[{trace_id[:8]}] {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return f"{prefix} - {message}"
