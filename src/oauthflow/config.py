"""OAuth2 client configuration from YAML file or environment.

Expected YAML structure:

    oauth2:
      provider: example
      base_uri: https://auth.example.com
      authorize_path: /oauth/authorize      # optional
      token_path: /oauth/token              # optional
      user_info_path: /userinfo             # optional
      timeout_seconds: 30                   # optional
      client:
        client_id: ${OAUTH2_CLIENT_ID}
        client_secret: ${OAUTH2_CLIENT_SECRET}
        redirect_uri: https://app.example.com/callback
        scope: openid profile               # optional

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from oauthflow.errors.exceptions import InvalidConfigurationError
from oauthflow.oauth2.models import ClientConfiguration
from oauthflow.oauth2.providers.base import OAuth2Provider, ProviderHooks
from oauthflow.oauth2.providers.generic import (
    DEFAULT_AUTHORIZE_PATH,
    DEFAULT_TOKEN_PATH,
    DEFAULT_USER_INFO_PATH,
    generic_provider,
)
from oauthflow.oauth2.transport import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "oauth2"
DEFAULT_ENV_PREFIX = "OAUTH2_"

# ${NAME} or ${NAME:-default}
_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<default>[^}]*))?\}")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping; a missing or empty file gives {}."""
    if not path.is_file():
        return {}
    return yaml.safe_load(path.read_text()) or {}


def _substitute(match: re.Match) -> str:
    value = os.environ.get(match["name"])
    if value is not None:
        return value
    # Unset without a default stays literal so validation can name it
    return match["default"] if match["default"] is not None else match[0]


def _expand_env_vars(data: Any) -> Any:
    """Expand environment references in every string of a loaded config tree."""
    if isinstance(data, str):
        return _ENV_REFERENCE.sub(_substitute, data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


@dataclass
class ClientSettings:
    """Everything needed to build an OAuth2Client for one provider."""

    provider_name: str
    base_uri: str
    client: ClientConfiguration
    authorize_path: str = DEFAULT_AUTHORIZE_PATH
    token_path: str = DEFAULT_TOKEN_PATH
    user_info_path: str = DEFAULT_USER_INFO_PATH
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def build_provider(self, hooks: ProviderHooks | None = None) -> OAuth2Provider:
        return generic_provider(
            self.provider_name,
            self.base_uri,
            authorize_path=self.authorize_path,
            token_path=self.token_path,
            user_info_path=self.user_info_path,
            hooks=hooks,
        )


def _client_configuration(data: Dict[str, Any]) -> ClientConfiguration:
    configuration = ClientConfiguration(
        client_id=str(data.get("client_id") or ""),
        client_secret=str(data.get("client_secret") or ""),
        redirect_uri=str(data.get("redirect_uri") or ""),
        scope=data.get("scope") or None,
    )
    configuration.validate()
    return configuration


def load_client_config(
    config_path: Path,
    section: str = DEFAULT_SECTION,
) -> ClientSettings:
    """Load OAuth2 client settings from a YAML file.

    Args:
        config_path: Path to the YAML file
        section: Top-level key holding the settings

    Raises:
        InvalidConfigurationError: If the file or section is missing, or a
            required value is empty
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise InvalidConfigurationError(f"Configuration file not found: {config_path}")

    yaml_data = _expand_env_vars(load_yaml(config_path))
    if section not in yaml_data:
        raise InvalidConfigurationError(
            f"Invalid config file: missing '{section}:' section in {config_path}"
        )

    data = yaml_data[section] or {}
    if not data.get("provider") or not data.get("base_uri"):
        raise InvalidConfigurationError(f"'{section}.provider' and '{section}.base_uri' are required")

    try:
        timeout_seconds = float(data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(
            f"'{section}.timeout_seconds' must be a number", cause=e
        ) from e

    settings = ClientSettings(
        provider_name=data["provider"],
        base_uri=data["base_uri"],
        client=_client_configuration(data.get("client") or {}),
        authorize_path=data.get("authorize_path", DEFAULT_AUTHORIZE_PATH),
        token_path=data.get("token_path", DEFAULT_TOKEN_PATH),
        user_info_path=data.get("user_info_path", DEFAULT_USER_INFO_PATH),
        timeout_seconds=timeout_seconds,
    )

    logger.debug(
        f"Loaded OAuth2 configuration for '{settings.provider_name}' from {config_path}",
        extra={"provider": settings.provider_name},
    )
    return settings


def config_from_env(prefix: str = DEFAULT_ENV_PREFIX) -> ClientConfiguration:
    """Build a ClientConfiguration from {prefix}CLIENT_ID, CLIENT_SECRET, REDIRECT_URI and SCOPE."""
    return _client_configuration(
        {
            "client_id": os.getenv(f"{prefix}CLIENT_ID"),
            "client_secret": os.getenv(f"{prefix}CLIENT_SECRET"),
            "redirect_uri": os.getenv(f"{prefix}REDIRECT_URI"),
            "scope": os.getenv(f"{prefix}SCOPE"),
        }
    )


__all__ = [
    "ClientSettings",
    "load_yaml",
    "load_client_config",
    "config_from_env",
]
