"""Generic provider for standard OAuth2 servers."""

import logging

from oauthflow.errors.exceptions import InvalidConfigurationError
from oauthflow.oauth2.models import Endpoint
from oauthflow.oauth2.providers.base import OAuth2Provider, ProviderHooks

logger = logging.getLogger(__name__)

DEFAULT_AUTHORIZE_PATH = "/oauth/authorize"
DEFAULT_TOKEN_PATH = "/oauth/token"
DEFAULT_USER_INFO_PATH = "/userinfo"


def generic_provider(
    name: str,
    base_uri: str,
    authorize_path: str = DEFAULT_AUTHORIZE_PATH,
    token_path: str = DEFAULT_TOKEN_PATH,
    user_info_path: str = DEFAULT_USER_INFO_PATH,
    hooks: ProviderHooks | None = None,
) -> OAuth2Provider:
    """
    Describe an OAuth2 server whose endpoints share one base URI.

    Args:
        name: Friendly provider name
        base_uri: Scheme and host, e.g. "https://auth.example.com"
        authorize_path: Path of the authorization endpoint
        token_path: Path of the token endpoint
        user_info_path: Path of the user-info endpoint
        hooks: Optional provider customization

    Raises:
        InvalidConfigurationError: If name or base_uri is missing
    """
    if not name or not base_uri:
        raise InvalidConfigurationError("name and base_uri are required")

    if not base_uri.startswith(("https://", "http://")):
        raise InvalidConfigurationError(f"base_uri must be an http(s) URL: {base_uri}")

    provider = OAuth2Provider(
        name=name,
        access_code_endpoint=Endpoint(base_uri, authorize_path),
        access_token_endpoint=Endpoint(base_uri, token_path),
        user_info_endpoint=Endpoint(base_uri, user_info_path),
        hooks=hooks or ProviderHooks(),
    )

    logger.debug(
        f"Initialized generic OAuth2 provider '{name}'",
        extra={"http_url": provider.access_token_endpoint.url},
    )
    return provider


__all__ = [
    "DEFAULT_AUTHORIZE_PATH",
    "DEFAULT_TOKEN_PATH",
    "DEFAULT_USER_INFO_PATH",
    "generic_provider",
]
