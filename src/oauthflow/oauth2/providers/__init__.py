"""OAuth2 provider descriptors."""

from oauthflow.oauth2.providers.base import (
    BeforeTokenRequestArgs,
    OAuth2Provider,
    ProviderHooks,
)
from oauthflow.oauth2.providers.generic import generic_provider

__all__ = ["BeforeTokenRequestArgs", "OAuth2Provider", "ProviderHooks", "generic_provider"]
