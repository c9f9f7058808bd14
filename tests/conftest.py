from __future__ import annotations

import logging
from typing import Any

import pytest
import yaml

from fitbit_mcp.core import auth
from fitbit_mcp.core.config import CONFIG_PATH_ENV, ConfigLoader


class RecordingServer:
    """Stands in for FastMCP: records every add_tool call in order."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def add_tool(self, fn, name=None, title=None, description=None, **kwargs):
        self.calls.append({"fn": fn, "name": name, "title": title, "description": description})

    def tool(self, name: str):
        for call in self.calls:
            if call["name"] == name:
                return call["fn"]
        raise KeyError(name)


@pytest.fixture(autouse=True)
def test_config(tmp_path, monkeypatch):
    """Point the config loader at a throwaway config.yaml and token file."""
    cfg = {
        "fitbit_api_url": "https://api.fitbit.com",
        "api_version": "1",
        "user_id": "-",
        "request_timeout": 5.0,
        "oauth": {"token_file": str(tmp_path / "token.json"), "redirect_port": 3999},
        "logging": {"dir": str(tmp_path / "logs")},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    monkeypatch.setenv("FITBIT_CLIENT_ID", "client-123")
    monkeypatch.setenv("FITBIT_CLIENT_SECRET", "secret-456")
    ConfigLoader.reset()
    auth.set_token_store(None)
    yield cfg
    ConfigLoader.reset()
    auth.set_token_store(None)


@pytest.fixture
def recording_server():
    return RecordingServer()


@pytest.fixture
def token_provider():
    async def _provider():
        return "test-token"

    return _provider


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
