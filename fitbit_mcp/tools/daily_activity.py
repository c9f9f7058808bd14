from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:

    async def get_daily_activity_summary(date: str):
        return await handle_api_call(
            f"activities/date/{date}.json",
            {"date": date},
            get_access_token,
            error_context=f"daily activity summary for {date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_daily_activity_summary",
        title="Daily activity summary",
        description=(
            "Get the raw JSON response for the daily activity summary from Fitbit for a single date: "
            "steps, distance, floors, calories, active minutes and goals."
        ),
        parameters_schema={"date": CommonSchemas.date},
        handler=get_daily_activity_summary,
    ))
