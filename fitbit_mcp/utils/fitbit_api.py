"""Tool registration and the authenticated Fitbit API call every tool delegates to."""
from __future__ import annotations

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol

import httpx

from fitbit_mcp.core.config import get_config
from fitbit_mcp.core.errors import ApiError, MalformedResponseError, NoCredentialError
from fitbit_mcp.utils.get_endpoint import get_endpoint
from fitbit_mcp.utils.response_utils import ResponseEnvelope, text_envelope
from fitbit_mcp.utils.schemas import ParamSchema


class CredentialProvider(Protocol):
    """Zero-argument coroutine returning the current access token, or None."""

    def __call__(self) -> Awaitable[Optional[str]]: ...


class ToolHost(Protocol):
    def add_tool(self, fn: Callable[..., Any], name: str | None = None, title: str | None = None,
                 description: str | None = None, **kwargs: Any) -> None: ...


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    parameters_schema: Mapping[str, ParamSchema]
    handler: Callable[..., Awaitable[ResponseEnvelope]]
    title: Optional[str] = field(default=None)


def _tool_signature(parameters_schema: Mapping[str, ParamSchema]) -> inspect.Signature:
    params = [
        inspect.Parameter(
            name,
            inspect.Parameter.KEYWORD_ONLY,
            default=inspect.Parameter.empty if schema.required else None,
            annotation=schema.annotation(),
        )
        for name, schema in parameters_schema.items()
    ]
    return inspect.Signature(parameters=params)


def register_tool(server: ToolHost, tool: ToolDescriptor) -> None:
    """Add `tool` to the server's tool table.

    The wrapper handed to the server carries a signature built from
    `parameters_schema`, which is what FastMCP derives the input schema from
    and validates arguments against. Handler errors are not caught here.
    """
    handler = tool.handler

    async def _wrapped(**kwargs: Any):
        envelope = await handler(**kwargs)
        return list(envelope.content)

    _wrapped.__signature__ = _tool_signature(tool.parameters_schema)  # type: ignore[attr-defined]
    _wrapped.__name__ = tool.name
    _wrapped.__qualname__ = tool.name
    _wrapped.__doc__ = tool.description
    # no annotations: keeps FastMCP on the plain content-block output path
    _wrapped.__annotations__ = {}

    server.add_tool(_wrapped, name=tool.name, title=tool.title, description=tool.description)


def _describe_status_error(resp: httpx.Response) -> str:
    body = resp.text.strip()
    reason = f"HTTP {resp.status_code} {resp.reason_phrase}".rstrip()
    return f"{reason} - {body}" if body else reason


async def handle_api_call(
    endpoint: str,
    params: Mapping[str, Any],
    get_access_token: CredentialProvider,
    *,
    error_context: str,
    api_version: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ResponseEnvelope:
    """GET `endpoint` from the Fitbit Web API and wrap the JSON body in a ResponseEnvelope.

    Args:
        endpoint: Path relative to `/{version}/user/{user_id}/`, e.g. `hrv/date/2023-01-15.json`.
        params: The validated tool arguments the endpoint was built from. Not sent on the wire.
        get_access_token: Credential provider; `None` means no token is available.
        error_context: Names the operation in error messages ("HRV data for 2023-01-15").
        api_version: Overrides the configured API version (sleep is served from "1.2").
        client: Optional shared httpx client; a short-lived one is opened otherwise.

    Raises:
        NoCredentialError: the provider returned no token; nothing was sent.
        ApiError: non-2xx status or transport failure.
        MalformedResponseError: 2xx with a body that is not JSON.
    """
    token = await get_access_token()
    if not token:
        raise NoCredentialError()

    url = get_endpoint(endpoint, api_version=api_version)
    headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
    timeout = float(get_config().get("request_timeout", 30.0))

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            resp = await _get(own_client, url, headers, timeout, error_context)
    else:
        resp = await _get(client, url, headers, timeout, error_context)

    if not resp.is_success:
        raise ApiError(error_context, _describe_status_error(resp), status_code=resp.status_code)

    try:
        data = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(
            error_context, f"response body is not valid JSON ({e})", status_code=resp.status_code
        ) from e

    return text_envelope(data)


async def _get(client: httpx.AsyncClient, url: str, headers: dict[str, str], timeout: float,
               error_context: str) -> httpx.Response:
    try:
        return await client.get(url, headers=headers, timeout=timeout)
    except httpx.HTTPError as e:
        raise ApiError(error_context, str(e) or type(e).__name__) from e
