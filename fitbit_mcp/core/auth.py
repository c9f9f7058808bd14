"""Fitbit OAuth2 authorization-code flow and the access-token provider.

`get_access_token` is the credential provider handed to every tool. It only
reads the persisted token; when the token is missing or expired it returns
None and the tool call fails with "No access token available". Running
`start_authorization_flow` again is the only way to obtain a new token.
"""
from __future__ import annotations

import asyncio
import json
import logging
import secrets
import time
import webbrowser
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from fitbit_mcp.core.config import get_client_credentials, get_config
from fitbit_mcp.core.errors import AuthError

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
# treat tokens this close to expiry as already expired
EXPIRY_LEEWAY_S = 60


class TokenStore:
    """JSON-file persistence for the token response."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.token: Optional[dict[str, Any]] = None

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.is_file():
            self.token = None
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to read token file %s; ignoring it", self.path)
            self.token = None
            return None
        self.token = data if isinstance(data, dict) else None
        return self.token

    def save(self, token: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(token, indent=2), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.warning("Could not restrict permissions on %s", self.path)
        self.token = token

    def access_token(self, now: Optional[float] = None) -> Optional[str]:
        if not self.token:
            return None
        value = self.token.get("access_token")
        if not value:
            return None
        expires_at = self.token.get("expires_at")
        if expires_at is not None:
            now = time.time() if now is None else now
            if float(expires_at) - EXPIRY_LEEWAY_S <= now:
                return None
        return value


def _oauth_config() -> dict[str, Any]:
    return get_config().get("oauth", {})


def _token_file_path() -> Path:
    path = Path(_oauth_config().get("token_file", ".fitbit-token.json"))
    return path if path.is_absolute() else REPO_ROOT / path


def redirect_uri() -> str:
    cfg = _oauth_config()
    return f"http://{cfg.get('redirect_host', 'localhost')}:{cfg.get('redirect_port', 3000)}{cfg.get('redirect_path', '/callback')}"


_store: Optional[TokenStore] = None


def get_token_store() -> TokenStore:
    global _store
    if _store is None:
        _store = TokenStore(_token_file_path())
    return _store


def set_token_store(store: Optional[TokenStore]) -> None:
    global _store
    _store = store


async def initialize_auth() -> None:
    """Load a previously persisted token, if any."""
    store = get_token_store()
    if store.load():
        logger.info("Loaded persisted Fitbit token from %s", store.path)
    else:
        logger.info("No persisted Fitbit token at %s", store.path)


async def get_access_token() -> Optional[str]:
    return get_token_store().access_token()


def build_authorization_url(state: str) -> str:
    cfg = _oauth_config()
    client_id, _ = get_client_credentials()
    query = urlencode({
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri(),
        "scope": " ".join(cfg.get("scopes", [])),
        "state": state,
    })
    return f"{cfg['authorize_url']}?{query}"


async def exchange_code(code: str, client: Optional[httpx.AsyncClient] = None) -> dict[str, Any]:
    """Trade an authorization code for a token and persist it.

    Raises AuthError when Fitbit rejects the code or cannot be reached.
    """
    cfg = _oauth_config()
    client_id, client_secret = get_client_credentials()
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": client_id,
        "redirect_uri": redirect_uri(),
    }
    timeout = float(get_config().get("request_timeout", 30.0))

    async def _post(c: httpx.AsyncClient) -> httpx.Response:
        return await c.post(cfg["token_url"], data=data, auth=(client_id, client_secret), timeout=timeout)

    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                resp = await _post(own_client)
        else:
            resp = await _post(client)
    except httpx.HTTPError as e:
        raise AuthError(f"Token request failed: {e}") from e

    if not resp.is_success:
        raise AuthError(f"Token request failed: HTTP {resp.status_code} - {resp.text.strip()}")
    try:
        token = resp.json()
    except json.JSONDecodeError as e:
        raise AuthError(f"Token response is not valid JSON: {e}") from e
    if not isinstance(token, dict) or not token.get("access_token"):
        raise AuthError("Token response did not contain an access_token")

    if "expires_in" in token:
        token["expires_at"] = time.time() + float(token["expires_in"])
    get_token_store().save(token)
    logger.info("Stored new Fitbit access token (user %s)", token.get("user_id", "?"))
    return token


def build_callback_app(state: str, server_holder: dict[str, Any]) -> Starlette:
    """Starlette app answering the OAuth redirect; stops its uvicorn server once a code was exchanged."""

    async def callback(request: Request) -> PlainTextResponse:
        if request.query_params.get("state") != state:
            return PlainTextResponse("State mismatch; restart the authorization.", status_code=400)
        error = request.query_params.get("error")
        if error:
            logger.error("Fitbit authorization was denied: %s", error)
            return PlainTextResponse(f"Authorization failed: {error}", status_code=400)
        code = request.query_params.get("code")
        if not code:
            return PlainTextResponse("Missing authorization code.", status_code=400)
        try:
            await exchange_code(code)
        except AuthError as e:
            logger.error("%s", e)
            return PlainTextResponse(str(e), status_code=502)
        server = server_holder.get("server")
        if server is not None:
            server.should_exit = True
        return PlainTextResponse("Fitbit authorization complete. You can close this window.")

    path = _oauth_config().get("redirect_path", "/callback")
    return Starlette(routes=[Route(path, callback)])


async def serve_callback(server: uvicorn.Server) -> bool:
    """Run the callback listener; returns False when it could not start.

    uvicorn calls sys.exit(3) when the port is taken. Inside a task that
    SystemExit would escape the event loop and stop the MCP server with it.
    """
    port = server.config.port
    try:
        await server.serve()
    except (SystemExit, OSError) as e:
        logger.error("authorization callback could not start on port %s: %r", port, e)
        return False
    return True


def _log_flow_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Authorization callback listener failed", exc_info=exc)


def start_authorization_flow(open_browser: bool = True) -> asyncio.Task:
    """Serve the OAuth callback in the background and point the user at the authorize URL.

    Must be called from a running event loop. Returns the task running the callback server;
    a failure to bind the redirect port is logged and never propagates to the caller's loop.
    """
    state = secrets.token_urlsafe(16)
    holder: dict[str, Any] = {}
    app = build_callback_app(state, holder)
    cfg = _oauth_config()
    server = uvicorn.Server(uvicorn.Config(
        app,
        host=cfg.get("redirect_host", "localhost"),
        port=int(cfg.get("redirect_port", 3000)),
        log_level="warning",
    ))
    holder["server"] = server

    url = build_authorization_url(state)
    logger.info("Authorize this server with Fitbit: %s", url)
    if open_browser:
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            logger.warning("Could not open a browser; open the URL above manually")
    task = asyncio.get_running_loop().create_task(serve_callback(server))
    task.add_done_callback(_log_flow_result)
    return task
