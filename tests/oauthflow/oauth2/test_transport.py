"""Tests for AiohttpTransport - request construction and verification."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from oauthflow.errors.exceptions import TransportError
from oauthflow.oauth2.models import Endpoint
from oauthflow.oauth2.transport import AiohttpTransport, TokenRequest, build_uri
from oauthflow.types import ErrorCategory

TOKEN_ENDPOINT = Endpoint("https://auth.example.com", "/oauth/token")


def _mock_session_with_response(response_mock):
    """Create a mock session where request() returns the given response context manager."""
    mock_session = MagicMock()
    mock_session.closed = False
    mock_session.request = MagicMock(return_value=response_mock)
    return mock_session


def _response(status, text):
    """Create a mock async context manager for a response."""
    mock_resp = AsyncMock()
    mock_resp.status = status
    mock_resp.headers = {"Content-Type": "application/json"}
    mock_resp.text = AsyncMock(return_value=text)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)
    return mock_resp


# ---------------------------------------------------------------------------
# build_uri / create_request
# ---------------------------------------------------------------------------


class TestBuildUri:
    def test_appends_params(self):
        uri = build_uri(Endpoint("https://auth.example.com", "/authorize"), {"a": "1", "b": "x y"})
        assert uri == "https://auth.example.com/authorize?a=1&b=x+y"

    def test_keeps_existing_query(self):
        uri = build_uri(Endpoint("https://auth.example.com/authorize?tenant=t1"), {"a": "1"})
        assert uri == "https://auth.example.com/authorize?tenant=t1&a=1"

    def test_no_params(self):
        assert build_uri(TOKEN_ENDPOINT, {}) == "https://auth.example.com/oauth/token"


class TestCreateRequest:
    def test_defaults(self):
        request = AiohttpTransport().create_request(TOKEN_ENDPOINT, "post")
        assert request.method == "POST"
        assert request.endpoint is TOKEN_ENDPOINT
        assert request.headers == {"Accept": "application/json"}

    def test_add_params_skips_none(self):
        request = TokenRequest(endpoint=TOKEN_ENDPOINT)
        request.add_params(state=None, client_id="c")
        assert request.params == {"client_id": "c"}

    def test_request_headers_are_independent(self):
        transport = AiohttpTransport(default_headers={"User-Agent": "oauthflow"})
        first = transport.create_request(TOKEN_ENDPOINT)
        first.headers["X-Extra"] = "1"
        second = transport.create_request(TOKEN_ENDPOINT)
        assert second.headers == {"Accept": "application/json", "User-Agent": "oauthflow"}


# ---------------------------------------------------------------------------
# execute_and_verify
# ---------------------------------------------------------------------------


class TestExecuteAndVerify:
    @pytest.mark.asyncio
    async def test_returns_content_on_success(self):
        transport = AiohttpTransport()
        transport._session = _mock_session_with_response(_response(200, '{"access_token": "t"}'))

        response = await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))

        assert response.status == 200
        assert response.content == '{"access_token": "t"}'

    @pytest.mark.asyncio
    async def test_posts_form_data(self):
        transport = AiohttpTransport(timeout_seconds=12)
        session = _mock_session_with_response(_response(200, "{}"))
        transport._session = session

        request = transport.create_request(TOKEN_ENDPOINT, "POST")
        request.data.update({"code": "abc", "grant_type": "authorization_code"})
        await transport.execute_and_verify(request)

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://auth.example.com/oauth/token")
        assert kwargs["data"] == {"code": "abc", "grant_type": "authorization_code"}
        assert kwargs["params"] is None
        assert kwargs["timeout"].total == 12

    @pytest.mark.parametrize(
        ("status", "category"),
        [
            (400, ErrorCategory.PERMANENT),
            (401, ErrorCategory.AUTH),
            (429, ErrorCategory.TRANSIENT),
            (503, ErrorCategory.TRANSIENT),
        ],
    )
    @pytest.mark.asyncio
    async def test_non_2xx_raises(self, status, category):
        transport = AiohttpTransport()
        transport._session = _mock_session_with_response(
            _response(status, '{"error": "invalid_grant"}')
        )

        with pytest.raises(TransportError) as exc_info:
            await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))

        assert exc_info.value.status_code == status
        assert exc_info.value.category == category
        assert "invalid_grant" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_undecodable_body_wrapped(self):
        response = _response(502, "")
        response.text = AsyncMock(
            side_effect=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        )
        transport = AiohttpTransport()
        transport._session = _mock_session_with_response(response)

        with pytest.raises(TransportError) as exc_info:
            await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))

        assert exc_info.value.status_code == 502
        assert exc_info.value.category == ErrorCategory.TRANSIENT
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self):
        transport = AiohttpTransport()
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
        transport._session = session

        with pytest.raises(TransportError) as exc_info:
            await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))

        assert exc_info.value.status_code is None
        assert exc_info.value.is_retryable
        assert isinstance(exc_info.value.cause, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        transport = AiohttpTransport(timeout_seconds=1)
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=asyncio.TimeoutError())
        transport._session = session

        with pytest.raises(TransportError, match="timeout"):
            await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))

    @pytest.mark.asyncio
    async def test_cancellation_not_wrapped(self):
        transport = AiohttpTransport()
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=asyncio.CancelledError())
        transport._session = session

        with pytest.raises(asyncio.CancelledError):
            await transport.execute_and_verify(TokenRequest(endpoint=TOKEN_ENDPOINT))


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_creates_session_when_none(self):
        transport = AiohttpTransport()
        session = await transport._ensure_session()
        assert isinstance(session, aiohttp.ClientSession)
        await transport.close()
        assert session.closed

    @pytest.mark.asyncio
    async def test_reuses_existing_session(self):
        transport = AiohttpTransport()
        session1 = await transport._ensure_session()
        session2 = await transport._ensure_session()
        assert session1 is session2
        await transport.close()

    @pytest.mark.asyncio
    async def test_caller_session_not_closed(self):
        session = aiohttp.ClientSession()
        transport = AiohttpTransport(session=session)
        await transport.close()
        assert not session.closed
        await session.close()

    @pytest.mark.asyncio
    async def test_close_without_session(self):
        await AiohttpTransport().close()
