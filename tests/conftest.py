"""
pytest configuration for oauthflow tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from oauthflow.logging.context import clear_log_context  # noqa: E402
from oauthflow.oauth2.models import ClientConfiguration, Endpoint  # noqa: E402
from oauthflow.oauth2.providers.generic import generic_provider  # noqa: E402
from oauthflow.oauth2.transport import TokenRequest, TransportResponse, build_uri  # noqa: E402


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 5, 14, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


class FakeTransport:
    """In-memory transport returning queued response bodies."""

    def __init__(self, *bodies: str):
        self.bodies = list(bodies)
        self.requests: list[TokenRequest] = []
        self.execute_and_verify = AsyncMock(side_effect=self._execute)
        self.close = AsyncMock()

    def queue(self, *bodies: str) -> None:
        self.bodies.extend(bodies)

    def create_request(self, endpoint: Endpoint, method: str = "GET") -> TokenRequest:
        return TokenRequest(endpoint=endpoint, method=method)

    def build_uri(self, request: TokenRequest) -> str:
        return build_uri(request.endpoint, request.params)

    async def _execute(self, request: TokenRequest) -> TransportResponse:
        self.requests.append(request)
        return TransportResponse(status=200, content=self.bodies.pop(0))


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_log_context()


@pytest.fixture
def configuration():
    return ClientConfiguration(
        client_id="test_client",
        client_secret="test-cs",
        redirect_uri="https://app.example.com/callback",
    )


@pytest.fixture
def provider():
    return generic_provider("example", "https://auth.example.com")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()
