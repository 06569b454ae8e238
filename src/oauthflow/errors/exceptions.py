"""
Exception hierarchy for oauthflow.

Every error raised by the client derives from OAuth2Error and carries an
ErrorCategory so callers can decide on their own retry policy.
"""

from oauthflow.types import ErrorCategory


class OAuth2Error(Exception):
    """
    Base exception for all OAuth2 client errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class InvalidConfigurationError(OAuth2Error):
    """OAuth2 client or provider configuration is invalid."""

    category = ErrorCategory.PERMANENT


class UnexpectedResponseError(OAuth2Error):
    """A required field was missing from a response or request context."""

    category = ErrorCategory.PERMANENT

    def __init__(
        self,
        field_name: str,
        message: str | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(
            message or f"Field '{field_name}' is missing or empty",
            cause,
            {"field_name": field_name, **(context or {})},
        )
        self.field_name = field_name


class ProviderError(UnexpectedResponseError):
    """The provider redirected back with an ``error`` parameter."""

    category = ErrorCategory.AUTH

    def __init__(
        self,
        error: str,
        description: str | None = None,
        uri: str | None = None,
    ):
        message = f"Provider returned error '{error}'"
        if description:
            message = f"{message}: {description}"
        super().__init__(
            "error",
            message,
            context={"error": error, "error_description": description},
        )
        self.error = error
        self.description = description
        self.uri = uri


class TransportError(OAuth2Error):
    """Non-2xx status or network failure while talking to the provider."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)
        self.status_code = status_code
        # Instance-level category: depends on the status
        self.category = (
            classify_http_status(status_code)
            if status_code is not None
            else ErrorCategory.TRANSIENT
        )


class NoRefreshTokenError(OAuth2Error):
    """Token was never fetched and no refresh token is available."""

    category = ErrorCategory.PERMANENT


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    # Auth redirects (302 = redirect to login page)
    if status_code in (302, 401):
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT  # Rate limited

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


__all__ = [
    "OAuth2Error",
    "InvalidConfigurationError",
    "UnexpectedResponseError",
    "ProviderError",
    "TransportError",
    "NoRefreshTokenError",
    "classify_http_status",
]
