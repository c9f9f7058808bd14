from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas, EnumChoice

ACTIVITY_RESOURCE = EnumChoice(
    description="Activity metric to retrieve.",
    choices=(
        "steps",
        "distance",
        "calories",
        "activityCalories",
        "caloriesBMR",
        "floors",
        "elevation",
        "minutesSedentary",
        "minutesLightlyActive",
        "minutesFairlyActive",
        "minutesVeryActive",
    ),
)


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register the activity time series tool (one value per day for a chosen metric)."""

    async def get_activity_timeseries(resource: str, start_date: str, end_date: str):
        return await handle_api_call(
            f"activities/{resource}/date/{start_date}/{end_date}.json",
            {"resource": resource, "start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"{resource} time series from {start_date} to {end_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_activity_timeseries",
        title="Activity time series",
        description=(
            "Get the raw JSON response for an activity metric (steps, distance, calories, floors, "
            "active minutes, ...) from Fitbit over a date range (max 1095 days), one value per day."
        ),
        parameters_schema={
            "resource": ACTIVITY_RESOURCE,
            "start_date": CommonSchemas.start_date,
            "end_date": CommonSchemas.end_date,
        },
        handler=get_activity_timeseries,
    ))
