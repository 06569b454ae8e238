#!/usr/bin/env python3
"""
Example web app running the authorization code flow with OAuth2Client.

/login redirects the browser to the provider, /callback exchanges the code
and /token returns a fresh access token (refreshing it when stale).

Usage:
    export OAUTH2_CLIENT_ID=... OAUTH2_CLIENT_SECRET=...
    python examples/login_server.py config.yaml

See oauthflow.config for the YAML structure.
"""

import asyncio
import logging
import secrets
import sys
from pathlib import Path

from aiohttp import web

from oauthflow.config import load_client_config
from oauthflow.errors import OAuth2Error, ProviderError
from oauthflow.logging import log_exception, setup_logging
from oauthflow.oauth2 import AiohttpTransport, OAuth2Client

logger = logging.getLogger(__name__)

CLIENT_KEY = web.AppKey("client", OAuth2Client)
STATE_KEY = web.AppKey("expected_state", dict)
# Serializes refreshes; a client has no single-flight guard of its own
LOCK_KEY = web.AppKey("refresh_lock", asyncio.Lock)


async def login(request: web.Request) -> web.Response:
    state = secrets.token_urlsafe(16)
    request.app[STATE_KEY]["value"] = state
    raise web.HTTPFound(request.app[CLIENT_KEY].get_login_link_uri(state=state))


async def callback(request: web.Request) -> web.Response:
    client = request.app[CLIENT_KEY]
    if request.query.get("state") != request.app[STATE_KEY].get("value"):
        raise web.HTTPBadRequest(text="state mismatch")

    try:
        await client.get_token(request.query)
    except ProviderError as e:
        raise web.HTTPForbidden(text=f"Login refused: {e.error}") from e
    except OAuth2Error as e:
        log_exception(logger, e, "Code exchange failed")
        raise web.HTTPBadGateway(text="Code exchange failed") from e

    return web.json_response({"token_type": client.token_type, "expires_at": str(client.expires_at)})


async def token(request: web.Request) -> web.Response:
    async with request.app[LOCK_KEY]:
        try:
            access_token = await request.app[CLIENT_KEY].get_current_token()
        except OAuth2Error as e:
            log_exception(logger, e, "Token refresh failed", include_traceback=False)
            raise web.HTTPUnauthorized(text="Log in at /login first") from e
    return web.json_response({"access_token": access_token})


def create_app(config_path: Path) -> web.Application:
    settings = load_client_config(config_path)
    client = OAuth2Client(
        settings.build_provider(),
        settings.client,
        transport=AiohttpTransport(timeout_seconds=settings.timeout_seconds),
    )

    app = web.Application()
    app[CLIENT_KEY] = client
    app[STATE_KEY] = {}
    app[LOCK_KEY] = asyncio.Lock()
    app.router.add_get("/login", login)
    app.router.add_get("/callback", callback)
    app.router.add_get("/token", token)

    async def close_client(app: web.Application) -> None:
        await app[CLIENT_KEY].close()

    app.on_cleanup.append(close_client)
    return app


if __name__ == "__main__":
    setup_logging(console_level=logging.DEBUG)
    web.run_app(create_app(Path(sys.argv[1] if len(sys.argv) > 1 else "config.yaml")), port=8080)
