import logging

from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas, EnumChoice

logger = logging.getLogger(__name__)

HEART_RATE_PERIOD = EnumChoice(
    description="Number of days of data ending on the given date.",
    choices=("1d", "7d", "30d", "1w", "1m"),
)


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register heart rate time series tools (resting heart rate and zones per day)."""

    async def get_heart_rate(date: str, period: str):
        endpoint = f"activities/heart/date/{date}/{period}.json"
        logger.debug("get_heart_rate %s", endpoint)
        return await handle_api_call(
            endpoint,
            {"date": date, "period": period},
            get_access_token,
            error_context=f"heart rate data for {date} ({period})",
        )

    async def get_heart_rate_by_date_range(start_date: str, end_date: str):
        endpoint = f"activities/heart/date/{start_date}/{end_date}.json"
        logger.debug("get_heart_rate_by_date_range %s", endpoint)
        return await handle_api_call(
            endpoint,
            {"start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"heart rate data from {start_date} to {end_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_heart_rate",
        title="Heart rate",
        description=(
            "Get the raw JSON response for heart rate data from Fitbit for a period ending on a date. "
            "Returns resting heart rate and time in each heart rate zone per day."
        ),
        parameters_schema={"date": CommonSchemas.date, "period": HEART_RATE_PERIOD},
        handler=get_heart_rate,
    ))

    register_tool(server, ToolDescriptor(
        name="get_heart_rate_by_date_range",
        title="Heart rate by date range",
        description=(
            "Get the raw JSON response for heart rate data from Fitbit over a date range (max 1 year). "
            "Returns resting heart rate and time in each heart rate zone per day."
        ),
        parameters_schema={"start_date": CommonSchemas.start_date, "end_date": CommonSchemas.end_date},
        handler=get_heart_rate_by_date_range,
    ))
