"""Exceptions raised by the Fitbit MCP server.

Tool handlers never turn these into a success payload: they propagate to
FastMCP, which reports them to the client as a failed tool call.
"""
from __future__ import annotations

from typing import Optional

NO_ACCESS_TOKEN_MESSAGE = "No access token available"


class FitbitMcpError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(FitbitMcpError):
    """Required configuration or environment variables are missing."""


class AuthError(FitbitMcpError):
    """The OAuth2 authorization-code exchange failed."""


class NoCredentialError(FitbitMcpError):
    """The credential provider had no access token to hand out."""

    def __init__(self, message: str = NO_ACCESS_TOKEN_MESSAGE) -> None:
        super().__init__(message)


class ApiError(FitbitMcpError):
    """A call to the Fitbit Web API failed.

    `error_context` names the logical operation ("HRV data for 2023-01-15")
    so callers can tell which tool failed without looking at the endpoint.
    """

    def __init__(self, error_context: str, reason: str, status_code: Optional[int] = None) -> None:
        self.error_context = error_context
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {error_context}: {reason}")


class MalformedResponseError(ApiError):
    """The API answered 2xx but the body was not valid JSON."""
