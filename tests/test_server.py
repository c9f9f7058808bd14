import asyncio
import logging
import socket
import sys

import pytest

from fitbit_mcp import server
from fitbit_mcp.core.logging_config import setup_logging

EXPECTED_TOOLS = {
    "get_activity_goals",
    "get_activity_timeseries",
    "get_azm_timeseries",
    "get_daily_activity_summary",
    "get_exercises",
    "get_food_log",
    "get_heart_rate",
    "get_heart_rate_by_date_range",
    "get_hrv",
    "get_hrv_by_date_range",
    "get_nutrition_by_date_range",
    "get_profile",
    "get_sleep_by_date_range",
    "get_weight",
}


@pytest.mark.asyncio
async def test_create_server_registers_every_tool_module(token_provider):
    mcp = server.create_server(token_provider)

    names = [t.name for t in await mcp.list_tools()]

    assert set(names) == EXPECTED_TOOLS
    assert len(names) == len(set(names))


def test_register_all_tools_passes_the_same_provider(recording_server, token_provider):
    modules = server.register_all_tools(recording_server, token_provider)

    assert "hrv" in modules and "sleep" in modules
    assert {c["name"] for c in recording_server.calls} == EXPECTED_TOOLS


def test_main_exits_when_environment_is_missing(monkeypatch, restore_root_logging):
    monkeypatch.setattr(server, "load_dotenv", lambda *a, **k: False)
    monkeypatch.delenv("FITBIT_CLIENT_ID")

    with pytest.raises(SystemExit) as exc_info:
        server.main()
    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_run_starts_authorization_flow_without_token(monkeypatch):
    started = []

    async def no_token():
        return None

    async def serve():
        return None

    monkeypatch.setattr(server.auth, "get_access_token", no_token)
    monkeypatch.setattr(server.auth, "start_authorization_flow", lambda: started.append(True))
    fake_mcp = type("FakeMCP", (), {"run_stdio_async": staticmethod(serve)})()

    await server.run(fake_mcp)

    assert started == [True]


def test_setup_logging_is_idempotent_and_avoids_stdout(tmp_path, restore_root_logging):
    setup_logging(logs_dir=tmp_path, level="DEBUG")
    setup_logging(logs_dir=tmp_path, level="DEBUG")

    root = logging.getLogger()
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)
                     and h.baseFilename.startswith(str(tmp_path))]
    assert len(file_handlers) == 1
    assert not any(getattr(h, "stream", None) is sys.stdout for h in root.handlers)
    assert root.level == logging.DEBUG
    assert len(list(tmp_path.glob("server_*.log"))) == 1


@pytest.mark.asyncio
async def test_run_survives_busy_callback_port(monkeypatch):
    finished = []

    async def no_token():
        return None

    async def serve():
        # long enough for the callback listener to try (and fail) to bind
        await asyncio.sleep(0.5)
        finished.append("stdio finished")

    monkeypatch.setattr(server.auth, "get_access_token", no_token)
    monkeypatch.setattr(server.auth.webbrowser, "open", lambda url: True)
    fake_mcp = type("FakeMCP", (), {"run_stdio_async": staticmethod(serve)})()

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as held:
        held.bind(("127.0.0.1", 0))
        held.listen(1)
        oauth = server.auth.get_config()["oauth"]
        oauth["redirect_host"] = "127.0.0.1"
        oauth["redirect_port"] = held.getsockname()[1]

        await server.run(fake_mcp)

    assert finished == ["stdio finished"]
