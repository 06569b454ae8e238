"""
HTTP transport used by the OAuth2 client.

The client only depends on the HttpTransport protocol: it asks the transport
for a request object bound to an endpoint, fills in parameters, and hands it
back for execution. AiohttpTransport is the default implementation.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiohttp

from oauthflow.errors.exceptions import TransportError
from oauthflow.oauth2.models import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30
# Longest slice of an error body kept in exceptions and logs
ERROR_BODY_LIMIT = 200


@dataclass
class TokenRequest:
    """
    Request under construction, mutable until executed.

    GET requests send ``params`` in the query string. POST requests send
    ``data`` as a form body and ``params`` in the query string.
    """

    endpoint: Endpoint
    method: str = "GET"
    params: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    def add_params(self, **values: str | None) -> None:
        """Add query parameters, skipping None values."""
        self.params.update({k: v for k, v in values.items() if v is not None})


@dataclass
class TransportResponse:
    """Verified (2xx) response from the provider."""

    status: int
    content: str
    headers: dict[str, str] = field(default_factory=dict)


def build_uri(endpoint: Endpoint, params: dict[str, str]) -> str:
    """Append ``params`` to the endpoint URL, keeping any existing query."""
    parts = urlsplit(endpoint.url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


class HttpTransport(Protocol):
    """Transport collaborator used by OAuth2Client."""

    def create_request(self, endpoint: Endpoint, method: str = "GET") -> TokenRequest:
        ...

    def build_uri(self, request: TokenRequest) -> str:
        ...

    async def execute_and_verify(self, request: TokenRequest) -> TransportResponse:
        """
        Execute the request.

        Raises:
            TransportError: On non-2xx status or network failure
        """
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """
    HttpTransport backed by an aiohttp ClientSession.

    The session is created lazily and recreated if closed. A session passed
    in by the caller is used as-is and never closed by the transport.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        default_headers: dict[str, str] | None = None,
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout_seconds = timeout_seconds
        self.default_headers = {"Accept": "application/json", **(default_headers or {})}

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP client session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def create_request(self, endpoint: Endpoint, method: str = "GET") -> TokenRequest:
        return TokenRequest(
            endpoint=endpoint,
            method=method.upper(),
            headers=dict(self.default_headers),
        )

    def build_uri(self, request: TokenRequest) -> str:
        return build_uri(request.endpoint, request.params)

    async def execute_and_verify(self, request: TokenRequest) -> TransportResponse:
        """
        Send the request and return the body of a 2xx response.

        Raises:
            TransportError: On non-2xx status, connection failure or timeout
        """
        session = await self._ensure_session()
        url = request.endpoint.url

        try:
            async with session.request(
                request.method,
                url,
                params=request.params or None,
                data=request.data or None,
                headers=request.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                try:
                    content = await response.text()
                except UnicodeDecodeError as e:
                    logger.error(
                        f"{request.method} {url} returned an undecodable body",
                        extra={"http_status": response.status, "error": str(e)},
                    )
                    raise TransportError(
                        f"HTTP {response.status}: undecodable response body",
                        status_code=response.status,
                        cause=e,
                        context={"url": url},
                    ) from e

                if not 200 <= response.status < 300:
                    logger.error(
                        f"{request.method} {url} failed: HTTP {response.status}",
                        extra={
                            "http_method": request.method,
                            "http_url": url,
                            "http_status": response.status,
                            "error": content[:ERROR_BODY_LIMIT],
                        },
                    )
                    raise TransportError(
                        f"HTTP {response.status}: {content[:ERROR_BODY_LIMIT]}",
                        status_code=response.status,
                        context={"url": url},
                    )

                return TransportResponse(
                    status=response.status,
                    content=content,
                    headers=dict(response.headers),
                )

        except asyncio.TimeoutError as e:
            logger.error(f"Timeout after {self.timeout_seconds}s calling {url}")
            raise TransportError(
                f"Request timeout after {self.timeout_seconds}s", cause=e
            ) from e
        except aiohttp.ClientError as e:
            logger.error(f"HTTP error calling {url}: {e}")
            raise TransportError(f"HTTP error: {e}", cause=e) from e

    async def close(self) -> None:
        """Close HTTP client session if this transport created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "TokenRequest",
    "TransportResponse",
    "HttpTransport",
    "AiohttpTransport",
    "build_uri",
]
