"""oauthflow: OAuth2 authorization code client with refresh-token renewal."""

from oauthflow.errors import (
    InvalidConfigurationError,
    NoRefreshTokenError,
    OAuth2Error,
    ProviderError,
    TransportError,
    UnexpectedResponseError,
)
from oauthflow.oauth2 import (
    AiohttpTransport,
    ClientConfiguration,
    Endpoint,
    OAuth2Client,
    OAuth2Provider,
    ProviderHooks,
    generic_provider,
)

__version__ = "0.1.0"

__all__ = [
    "OAuth2Client",
    "ClientConfiguration",
    "Endpoint",
    "OAuth2Provider",
    "ProviderHooks",
    "generic_provider",
    "AiohttpTransport",
    "OAuth2Error",
    "InvalidConfigurationError",
    "UnexpectedResponseError",
    "ProviderError",
    "TransportError",
    "NoRefreshTokenError",
]
