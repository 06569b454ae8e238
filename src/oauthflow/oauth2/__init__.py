"""
OAuth2 authorization code client with automatic refresh.

Basic Usage:
    from oauthflow.oauth2 import ClientConfiguration, OAuth2Client, generic_provider

    provider = generic_provider("example", "https://auth.example.com")
    configuration = ClientConfiguration(
        client_id=os.getenv("OAUTH2_CLIENT_ID"),
        client_secret=os.getenv("OAUTH2_CLIENT_SECRET"),
        redirect_uri="https://app.example.com/callback",
        scope="openid profile",
    )

    async with OAuth2Client(provider, configuration) as client:
        # Send the user here
        login_uri = client.get_login_link_uri(state=csrf_value)

        # In the redirect handler
        await client.get_token(request.query)

        # Before each API call (refreshes when stale)
        token = await client.get_current_token()
        headers = {"Authorization": f"Bearer {token}"}

Provider quirks:
    def add_resource(args: BeforeTokenRequestArgs) -> None:
        args.request.data["resource"] = "https://api.example.com"

    provider = generic_provider(
        "example",
        "https://auth.example.com",
        hooks=ProviderHooks(before_token_request=add_resource),
    )
"""

from oauthflow.oauth2.client import OAuth2Client
from oauthflow.oauth2.expiry import EXPIRY_MARGIN_SECONDS, compute_expires_at, parse_expires_in
from oauthflow.oauth2.grants import build_grant_parameters
from oauthflow.oauth2.models import ClientConfiguration, Endpoint, GrantType, TokenState
from oauthflow.oauth2.parser import TokenResponseParser
from oauthflow.oauth2.providers import (
    BeforeTokenRequestArgs,
    OAuth2Provider,
    ProviderHooks,
    generic_provider,
)
from oauthflow.oauth2.transport import (
    AiohttpTransport,
    HttpTransport,
    TokenRequest,
    TransportResponse,
)

__all__ = [
    # Client
    "OAuth2Client",
    # Models
    "ClientConfiguration",
    "Endpoint",
    "GrantType",
    "TokenState",
    # Building blocks
    "TokenResponseParser",
    "build_grant_parameters",
    "compute_expires_at",
    "parse_expires_in",
    "EXPIRY_MARGIN_SECONDS",
    # Providers
    "OAuth2Provider",
    "ProviderHooks",
    "BeforeTokenRequestArgs",
    "generic_provider",
    # Transport
    "HttpTransport",
    "AiohttpTransport",
    "TokenRequest",
    "TransportResponse",
]
