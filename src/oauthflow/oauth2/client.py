"""OAuth2 authorization code client with refresh-token renewal."""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from oauthflow.errors.exceptions import NoRefreshTokenError, ProviderError, UnexpectedResponseError
from oauthflow.logging.context import set_log_context
from oauthflow.oauth2.expiry import (
    compute_expires_at,
    is_fresh,
    parse_expires_in,
    remaining_lifetime,
    utc_now,
)
from oauthflow.oauth2.grants import build_grant_parameters, get_parameter
from oauthflow.oauth2.models import ClientConfiguration, GrantType, TokenState
from oauthflow.oauth2.parser import TokenResponseParser
from oauthflow.oauth2.providers.base import BeforeTokenRequestArgs, OAuth2Provider, run_hook
from oauthflow.oauth2.transport import AiohttpTransport, HttpTransport

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
EXPIRES_KEY = "expires_in"
TOKEN_TYPE_KEY = "token_type"


class OAuth2Client:
    """
    Client side of the OAuth2 authorization code grant.

    Builds the login link, exchanges the callback's code for tokens and keeps
    the access token fresh using the refresh token.

    A client is meant for one logical flow: concurrent calls to
    get_current_token() may both refresh. Callers needing single-flight
    refresh should serialize access themselves (e.g. with an asyncio.Lock).

    Usage:
        provider = generic_provider("example", "https://auth.example.com")
        async with OAuth2Client(provider, configuration) as client:
            redirect_to = client.get_login_link_uri(state=csrf_value)
            ...
            await client.get_token(request.query)  # on callback
            ...
            token = await client.get_current_token()  # refreshed when stale
    """

    def __init__(
        self,
        provider: OAuth2Provider,
        configuration: ClientConfiguration,
        transport: HttpTransport | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        expires_at: datetime | None = None,
        parser: TokenResponseParser | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize client, optionally pre-seeded with earlier tokens.

        Args:
            provider: Endpoints and hooks of the OAuth2 service
            configuration: Client registration
            transport: HTTP transport (default: AiohttpTransport)
            access_token: Previously obtained access token
            refresh_token: Previously obtained refresh token
            expires_at: Expiry of the previously obtained access token (naive
                values are read as local time)
            parser: Token response parser (default: JSON then query string)
            clock: Returns the current UTC time

        Raises:
            InvalidConfigurationError: If a required configuration field is empty
        """
        configuration.validate()
        if expires_at is not None and expires_at.tzinfo is None:
            # Naive datetimes are taken as local time
            expires_at = expires_at.astimezone(UTC)

        self.provider = provider
        self._configuration = configuration
        self._transport = transport or AiohttpTransport()
        self._parser = parser or TokenResponseParser()
        self._clock = clock
        self._tokens = TokenState(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )

        logger.debug(
            f"Initialized OAuth2 client for '{provider.name}'",
            extra={"provider": provider.name},
        )

    async def __aenter__(self) -> "OAuth2Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def name(self) -> str:
        """Friendly name of provider (OAuth2 service)."""
        return self.provider.name

    @property
    def configuration(self) -> ClientConfiguration:
        return self._configuration

    @property
    def access_token(self) -> str | None:
        return self._tokens.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._tokens.refresh_token

    @property
    def token_type(self) -> str | None:
        return self._tokens.token_type

    @property
    def expires_at(self) -> datetime | None:
        return self._tokens.expires_at

    @property
    def state(self) -> str | None:
        """State posted back by the provider on the last callback."""
        return self._tokens.state

    @property
    def token_state(self) -> TokenState:
        """Copy of the current token state."""
        return self._tokens.copy()

    def get_login_link_uri(self, state: str | None = None) -> str:
        """
        Return the URI the user should be redirected to in order to log in.

        Args:
            state: Opaque value the provider posts back on callback

        Returns:
            Authorization endpoint URI with query parameters
        """
        request = self._transport.create_request(self.provider.access_code_endpoint)
        request.add_params(
            response_type="code",
            client_id=self._configuration.client_id,
            redirect_uri=self._configuration.redirect_uri,
        )
        if self._configuration.scope:
            request.add_params(scope=self._configuration.scope)
        request.add_params(state=state)
        return self._transport.build_uri(request)

    async def get_token(self, parameters: Mapping[str, Any]) -> str:
        """
        Exchange the callback's authorization code for an access token.

        Args:
            parameters: Query parameters posted back to the redirect URI

        Returns:
            Access token

        Raises:
            ProviderError: If the callback carries an ``error`` parameter
            UnexpectedResponseError: If ``code`` or the access token is missing
            TransportError: If the token endpoint call fails
        """
        self._check_error_and_set_state(parameters)
        return await self._query_access_token(parameters, GrantType.AUTHORIZATION_CODE)

    async def get_current_token(
        self,
        refresh_token: str | None = None,
        force_update: bool = False,
    ) -> str:
        """
        Get a valid access token, refreshing it when stale.

        Args:
            refresh_token: Refresh token to use instead of the stored one
            force_update: Refresh even if the cached token is still valid

        Returns:
            Access token

        Raises:
            NoRefreshTokenError: If a refresh is needed but no refresh token exists
            UnexpectedResponseError: If the refresh response has no access token
            TransportError: If the token endpoint call fails
        """
        now = self._clock()
        if not force_update and is_fresh(self._tokens.access_token, self._tokens.expires_at, now):
            logger.debug(
                f"Using cached token for '{self.name}' "
                f"(expires in {remaining_lifetime(self._tokens.expires_at, now).total_seconds()}s)"
            )
            return self._tokens.access_token

        refresh_token = refresh_token or self._tokens.refresh_token
        if not refresh_token:
            raise NoRefreshTokenError("Token never fetched and refresh token not provided.")

        return await self._query_access_token(
            {REFRESH_TOKEN_KEY: refresh_token}, GrantType.REFRESH_TOKEN
        )

    def authorization_header(self) -> dict[str, str]:
        """
        Build the Authorization header for the current access token.

        Does not refresh; call get_current_token() first when freshness matters.
        """
        if not self._tokens.access_token:
            raise NoRefreshTokenError("Token never fetched.")
        return {
            "Authorization": f"{self._tokens.token_type or 'Bearer'} {self._tokens.access_token}"
        }

    def _check_error_and_set_state(self, parameters: Mapping[str, Any]) -> None:
        error = get_parameter(parameters, "error")
        if error and error.strip():
            logger.warning(
                f"Provider '{self.name}' returned an error on callback",
                extra={"error": error},
            )
            raise ProviderError(
                error,
                description=get_parameter(parameters, "error_description"),
                uri=get_parameter(parameters, "error_uri"),
            )

        self._tokens.state = get_parameter(parameters, "state")

    def _parse(self, content: str | None, key: str) -> str | None:
        override = self.provider.hooks.parse_token_response
        if override is not None:
            return override(content, key)
        return self._parser.parse(content, key)

    async def _query_access_token(
        self, parameters: Mapping[str, Any], grant_type: GrantType
    ) -> str:
        """Issue the token request and apply the response to the token state."""
        set_log_context(provider=self.name, grant_type=grant_type.value)

        request = self._transport.create_request(self.provider.access_token_endpoint, "POST")
        request.data.update(build_grant_parameters(grant_type, self._configuration, parameters))

        await run_hook(
            self.provider.hooks.before_token_request,
            BeforeTokenRequestArgs(
                request=request,
                parameters=parameters,
                configuration=self._configuration,
                grant_type=grant_type,
            ),
        )

        logger.debug(
            f"Requesting token from '{self.name}'",
            extra={"http_method": request.method, "http_url": request.endpoint.url},
        )
        response = await self._transport.execute_and_verify(request)
        content = response.content

        access_token = self._parse(content, ACCESS_TOKEN_KEY)
        if not access_token:
            raise UnexpectedResponseError(ACCESS_TOKEN_KEY)

        updated = self._tokens.copy()
        updated.access_token = access_token

        refresh_token = self._parse(content, REFRESH_TOKEN_KEY)
        rotated = bool(refresh_token and refresh_token.strip())
        if rotated:
            updated.refresh_token = refresh_token

        updated.token_type = self._parse(content, TOKEN_TYPE_KEY)

        raw_expires_in = self._parse(content, EXPIRES_KEY)
        expires_in = parse_expires_in(raw_expires_in)
        if expires_in is not None:
            updated.expires_at = compute_expires_at(expires_in, self._clock())
        elif raw_expires_in:
            logger.warning(
                f"Unparseable expires_in from '{self.name}', keeping previous expiry",
                extra={"error": raw_expires_in[:50]},
            )

        self._tokens = updated

        logger.info(
            f"Tokens updated for '{self.name}'",
            extra={
                "grant_type": grant_type.value,
                "token_type": updated.token_type,
                "expires_in": expires_in,
                "expires_at": updated.expires_at,
                "refresh_token_rotated": rotated,
            },
        )

        await run_hook(self.provider.hooks.after_tokens_changed, updated.copy())
        return updated.access_token

    async def close(self) -> None:
        """Release the transport's resources."""
        await self._transport.close()


__all__ = ["OAuth2Client"]
