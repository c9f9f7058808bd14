from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import EnumChoice

GOAL_PERIOD = EnumChoice(description="Goal period.", choices=("daily", "weekly"))


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:

    async def get_activity_goals(period: str):
        return await handle_api_call(
            f"activities/goals/{period}.json",
            {"period": period},
            get_access_token,
            error_context=f"{period} activity goals",
        )

    register_tool(server, ToolDescriptor(
        name="get_activity_goals",
        title="Activity goals",
        description="Get the raw JSON response for the user's daily or weekly activity goals from Fitbit.",
        parameters_schema={"period": GOAL_PERIOD},
        handler=get_activity_goals,
    ))
