"""Provider descriptor and customization hooks."""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from oauthflow.oauth2.models import ClientConfiguration, Endpoint, GrantType, TokenState
from oauthflow.oauth2.transport import TokenRequest


@dataclass
class BeforeTokenRequestArgs:
    """
    Arguments passed to the pre-request hook.

    ``request`` already carries the base grant parameters in ``request.data``;
    the hook may add, rename or drop fields, or set headers.
    """

    request: TokenRequest
    parameters: Mapping[str, Any]
    configuration: ClientConfiguration
    grant_type: GrantType


BeforeTokenRequestHook = Callable[[BeforeTokenRequestArgs], Awaitable[None] | None]
AfterTokensChangedHook = Callable[[TokenState], Awaitable[None] | None]
ParseTokenResponseHook = Callable[[str | None, str], str | None]


@dataclass
class ProviderHooks:
    """
    Provider-specific behavior injected into the client.

    Every hook is optional. ``before_token_request`` and
    ``after_tokens_changed`` may be plain or coroutine functions.

    Attributes:
        before_token_request: Mutates the outgoing token request
        after_tokens_changed: Called with a copy of the new token state
        parse_token_response: Replaces the default response parser
    """

    before_token_request: BeforeTokenRequestHook | None = None
    after_tokens_changed: AfterTokensChangedHook | None = None
    parse_token_response: ParseTokenResponseHook | None = None


async def run_hook(hook: Callable[..., Any] | None, *args: Any) -> None:
    """Call a hook, awaiting it if it returned an awaitable."""
    if hook is None:
        return
    result = hook(*args)
    if inspect.isawaitable(result):
        await result


@dataclass
class OAuth2Provider:
    """
    An OAuth2 service: its endpoints and its quirks.

    Attributes:
        name: Friendly name of the provider
        access_code_endpoint: Endpoint the user is redirected to for login
        access_token_endpoint: Endpoint issuing access tokens
        user_info_endpoint: Endpoint describing the logged-in user
        hooks: Provider-specific customization
    """

    name: str
    access_code_endpoint: Endpoint
    access_token_endpoint: Endpoint
    user_info_endpoint: Endpoint
    hooks: ProviderHooks = field(default_factory=ProviderHooks)


__all__ = [
    "BeforeTokenRequestArgs",
    "ProviderHooks",
    "OAuth2Provider",
    "run_hook",
]
