"""MCP server exposing Fitbit Web API health data as tools."""

__version__ = "1.0.0"
