from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas, EnumChoice

NUTRITION_RESOURCE = EnumChoice(
    description="Nutrition time series to retrieve: calories consumed or water intake.",
    choices=("caloriesIn", "water"),
)


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register food log and nutrition time series tools."""

    async def get_food_log(date: str):
        return await handle_api_call(
            f"foods/log/date/{date}.json",
            {"date": date},
            get_access_token,
            error_context=f"food log for {date}",
        )

    async def get_nutrition_by_date_range(resource: str, start_date: str, end_date: str):
        return await handle_api_call(
            f"foods/log/{resource}/date/{start_date}/{end_date}.json",
            {"resource": resource, "start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"{resource} data from {start_date} to {end_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_food_log",
        title="Food log",
        description=(
            "Get the raw JSON response for the food log from Fitbit for a single date. "
            "Returns logged foods with their nutritional values and the daily summary."
        ),
        parameters_schema={"date": CommonSchemas.date},
        handler=get_food_log,
    ))

    register_tool(server, ToolDescriptor(
        name="get_nutrition_by_date_range",
        title="Nutrition time series",
        description=(
            "Get the raw JSON response for calories consumed or water intake from Fitbit over a date range "
            "(max 1095 days), one value per day."
        ),
        parameters_schema={
            "resource": NUTRITION_RESOURCE,
            "start_date": CommonSchemas.start_date,
            "end_date": CommonSchemas.end_date,
        },
        handler=get_nutrition_by_date_range,
    ))
