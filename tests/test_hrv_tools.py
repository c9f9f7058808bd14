from unittest.mock import AsyncMock

import pytest

from fitbit_mcp.tools import hrv
from fitbit_mcp.utils.response_utils import text_envelope
from fitbit_mcp.utils.schemas import CommonSchemas

HRV_RESPONSE = {"hrv": [{"dateTime": "2023-01-15", "value": {"dailyRmssd": 35.2, "deepRmssd": 42.1}}]}


@pytest.fixture
def api_call(monkeypatch):
    mock = AsyncMock(return_value=text_envelope(HRV_RESPONSE))
    monkeypatch.setattr(hrv, "handle_api_call", mock)
    return mock


@pytest.fixture
def registered(monkeypatch):
    """Captures the ToolDescriptor passed to each register_tool call."""
    calls = []
    monkeypatch.setattr(hrv, "register_tool", lambda server, tool: calls.append((server, tool)))
    return calls


@pytest.fixture
def get_access_token():
    return AsyncMock(return_value="token")


def test_registers_both_tools_in_order(registered, get_access_token):
    server = object()
    hrv.register_tools(server, get_access_token)

    assert len(registered) == 2
    assert all(s is server for s, _ in registered)
    assert registered[0][1].name == "get_hrv"
    assert registered[1][1].name == "get_hrv_by_date_range"


def test_parameter_schemas(registered, get_access_token):
    hrv.register_tools(object(), get_access_token)

    assert dict(registered[0][1].parameters_schema) == {"date": CommonSchemas.date}
    assert dict(registered[1][1].parameters_schema) == {
        "start_date": CommonSchemas.start_date,
        "end_date": CommonSchemas.end_date,
    }
    assert registered[0][1].description.startswith(
        "Get the raw JSON response for Heart Rate Variability (HRV) summary data from Fitbit for a single date."
    )
    assert "(max 30 days)" in registered[1][1].description


@pytest.mark.asyncio
async def test_get_hrv_calls_api_with_endpoint_and_context(registered, api_call, get_access_token):
    hrv.register_tools(object(), get_access_token)

    result = await registered[0][1].handler(date="2023-01-15")

    api_call.assert_awaited_once_with(
        "hrv/date/2023-01-15.json",
        {"date": "2023-01-15"},
        get_access_token,
        error_context="HRV data for 2023-01-15",
    )
    assert result.as_dict() == {
        "content": [{
            "type": "text",
            "text": '{"hrv":[{"dateTime":"2023-01-15","value":{"dailyRmssd":35.2,"deepRmssd":42.1}}]}',
        }]
    }


@pytest.mark.asyncio
async def test_get_hrv_by_date_range_calls_api(registered, api_call, get_access_token):
    hrv.register_tools(object(), get_access_token)

    await registered[1][1].handler(start_date="2023-01-01", end_date="2023-01-07")

    api_call.assert_awaited_once_with(
        "hrv/date/2023-01-01/2023-01-07.json",
        {"start_date": "2023-01-01", "end_date": "2023-01-07"},
        get_access_token,
        error_context="HRV data from 2023-01-01 to 2023-01-07",
    )


@pytest.mark.parametrize("index,kwargs", [
    (0, {"date": "2023-01-15"}),
    (1, {"start_date": "2023-01-01", "end_date": "2023-01-07"}),
])
@pytest.mark.asyncio
async def test_api_errors_propagate(registered, api_call, get_access_token, index, kwargs):
    api_call.side_effect = RuntimeError("API error occurred")
    hrv.register_tools(object(), get_access_token)

    with pytest.raises(RuntimeError, match="API error occurred"):
        await registered[index][1].handler(**kwargs)


@pytest.mark.asyncio
async def test_null_access_token_rejects_end_to_end(registered):
    """No patched API call here: the real executor must refuse before any request."""

    async def no_token():
        return None

    hrv.register_tools(object(), no_token)

    with pytest.raises(Exception, match="No access token available"):
        await registered[0][1].handler(date="2023-01-15")
