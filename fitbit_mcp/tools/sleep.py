from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas

# Sleep logs are only served by the 1.2 API
SLEEP_API_VERSION = "1.2"


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register the sleep log tool."""

    async def get_sleep_by_date_range(start_date: str, end_date: str):
        return await handle_api_call(
            f"sleep/date/{start_date}/{end_date}.json",
            {"start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"sleep data from {start_date} to {end_date}",
            api_version=SLEEP_API_VERSION,
        )

    register_tool(server, ToolDescriptor(
        name="get_sleep_by_date_range",
        title="Sleep logs by date range",
        description=(
            "Get the raw JSON response for sleep logs from Fitbit over a date range (max 100 days). "
            "Includes sleep stages, efficiency and time asleep for each log."
        ),
        parameters_schema={"start_date": CommonSchemas.start_date, "end_date": CommonSchemas.end_date},
        handler=get_sleep_by_date_range,
    ))
