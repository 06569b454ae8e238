"""OAuth2 data models and configuration."""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum

from oauthflow.errors.exceptions import InvalidConfigurationError


class GrantType(str, Enum):
    """Grant used for a single token endpoint request."""

    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class ClientConfiguration:
    """
    OAuth2 client registration, read-only for the lifetime of a client.

    Attributes:
        client_id: OAuth2 client ID
        client_secret: OAuth2 client secret
        redirect_uri: Callback URI registered with the provider
        scope: Space-separated scopes to request, omitted from the login
            link when empty
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    scope: str | None = None

    def validate(self) -> None:
        """
        Raise if any required field is empty.

        Raises:
            InvalidConfigurationError: Naming every missing field
        """
        missing = [
            f.name
            for f in fields(self)
            if f.name != "scope" and not getattr(self, f.name)
        ]
        if missing:
            raise InvalidConfigurationError(f"{', '.join(missing)} required")

    def __repr__(self) -> str:
        # Don't leak the secret
        return (
            f"ClientConfiguration(client_id={self.client_id!r}, "
            f"redirect_uri={self.redirect_uri!r}, scope={self.scope!r})"
        )


@dataclass(frozen=True)
class Endpoint:
    """Provider URL split into base URI and resource path."""

    base_uri: str
    resource: str = ""

    @property
    def url(self) -> str:
        if not self.resource:
            return self.base_uri
        return f"{self.base_uri.rstrip('/')}/{self.resource.lstrip('/')}"

    def __str__(self) -> str:
        return self.url


@dataclass
class TokenState:
    """
    Tokens held by one client instance.

    Attributes:
        access_token: Credential for API calls, never emptied by an exchange
        refresh_token: Credential for renewing the access token
        token_type: Token type reported by the provider (typically "Bearer")
        expires_at: UTC deadline after which the access token is stale,
            already shrunk by the safety margin
        state: Opaque value echoed back on the last callback
    """

    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_at: datetime | None = None
    state: str | None = None

    def copy(self) -> "TokenState":
        return replace(self)

    def __repr__(self) -> str:
        return (
            f"TokenState(access_token={'***' if self.access_token else None}, "
            f"refresh_token={'***' if self.refresh_token else None}, "
            f"token_type={self.token_type!r}, expires_at={self.expires_at!r}, "
            f"state={self.state!r})"
        )


__all__ = ["GrantType", "ClientConfiguration", "Endpoint", "TokenState"]
