from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import EnumChoice

WEIGHT_PERIOD = EnumChoice(
    description="How far back from today to retrieve weight entries.",
    choices=("1d", "7d", "30d", "3m", "6m", "1y"),
)


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:

    async def get_weight(period: str):
        return await handle_api_call(
            f"body/weight/date/today/{period}.json",
            {"period": period},
            get_access_token,
            error_context=f"weight data for period {period}",
        )

    register_tool(server, ToolDescriptor(
        name="get_weight",
        title="Weight",
        description=(
            "Get the raw JSON response for weight entries from Fitbit for a period ending today. "
            "Values are in the unit system of the user's profile."
        ),
        parameters_schema={"period": WEIGHT_PERIOD},
        handler=get_weight,
    ))
