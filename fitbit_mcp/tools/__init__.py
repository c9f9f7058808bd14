# tools package for Fitbit MCP server tools
# Modules in this package expose `register_tools(server, get_access_token) -> None`.
# The server imports every module in this directory and calls it once at startup.
__all__ = []
