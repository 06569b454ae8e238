"""Typed error hierarchy with retry classification."""

from oauthflow.errors.exceptions import (
    InvalidConfigurationError,
    NoRefreshTokenError,
    OAuth2Error,
    ProviderError,
    TransportError,
    UnexpectedResponseError,
    classify_http_status,
)

__all__ = [
    "OAuth2Error",
    "InvalidConfigurationError",
    "UnexpectedResponseError",
    "ProviderError",
    "TransportError",
    "NoRefreshTokenError",
    "classify_http_status",
]
