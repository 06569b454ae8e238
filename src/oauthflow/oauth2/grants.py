"""Token endpoint request parameters for each grant type."""

from collections.abc import Mapping
from typing import Any

from oauthflow.errors.exceptions import UnexpectedResponseError
from oauthflow.oauth2.models import ClientConfiguration, GrantType


def get_parameter(parameters: Mapping[str, Any] | None, key: str) -> str | None:
    """
    Read one parameter from a callback parameter set.

    Accepts a plain mapping, a mapping of value lists (``parse_qs`` output)
    or a multidict (aiohttp ``request.query``). Repeated values are joined
    with commas.
    """
    if not parameters:
        return None

    if hasattr(parameters, "getall"):
        values = parameters.getall(key, [])
    else:
        value = parameters.get(key)
        if value is None:
            return None
        values = value if isinstance(value, (list, tuple)) else [value]

    values = [str(v) for v in values if v is not None]
    if not values:
        return None
    return ",".join(values)


def require_parameter(parameters: Mapping[str, Any] | None, key: str) -> str:
    """
    Read a parameter that must be present and non-blank.

    Raises:
        UnexpectedResponseError: If the parameter is missing or blank
    """
    value = get_parameter(parameters, key)
    if value is None or not value.strip():
        raise UnexpectedResponseError(key)
    return value


def build_grant_parameters(
    grant_type: GrantType,
    configuration: ClientConfiguration,
    parameters: Mapping[str, Any] | None,
) -> dict[str, str]:
    """
    Build the form parameters for a token endpoint request.

    Args:
        grant_type: Grant for this single request
        configuration: Client registration
        parameters: Callback parameters (authorization code grant) or the
            refresh parameter set (refresh token grant)

    Returns:
        Parameters to post to the token endpoint

    Raises:
        UnexpectedResponseError: If ``code`` or ``refresh_token`` is missing
    """
    if grant_type == GrantType.REFRESH_TOKEN:
        return {
            "refresh_token": require_parameter(parameters, "refresh_token"),
            "client_id": configuration.client_id,
            "client_secret": configuration.client_secret,
            "grant_type": grant_type.value,
        }

    return {
        "code": require_parameter(parameters, "code"),
        "client_id": configuration.client_id,
        "client_secret": configuration.client_secret,
        "redirect_uri": configuration.redirect_uri,
        "grant_type": GrantType.AUTHORIZATION_CODE.value,
    }


__all__ = ["get_parameter", "require_parameter", "build_grant_parameters"]
