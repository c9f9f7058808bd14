from datetime import date as _date
from typing import Optional
from urllib.parse import urlencode

from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas

DEFAULT_LIMIT = 20


def exercise_list_endpoint(before_date: str, limit: int) -> str:
    # The list endpoint requires sort=desc with beforeDate and only supports offset=0
    query = urlencode({"beforeDate": before_date, "sort": "desc", "offset": 0, "limit": limit})
    return f"activities/list.json?{query}"


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register the exercise/activity log list tool."""

    async def get_exercises(before_date: Optional[str] = None, limit: Optional[int] = None):
        before_date = before_date or _date.today().isoformat()
        limit = limit or DEFAULT_LIMIT
        return await handle_api_call(
            exercise_list_endpoint(before_date, limit),
            {"before_date": before_date, "limit": limit},
            get_access_token,
            error_context=f"exercise list before {before_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_exercises",
        title="Exercise log",
        description=(
            "Get the raw JSON response for logged exercises and activities from Fitbit, newest first. "
            "Includes activity type, duration, calories and heart rate zones where recorded."
        ),
        parameters_schema={"before_date": CommonSchemas.before_date, "limit": CommonSchemas.limit},
        handler=get_exercises,
    ))
