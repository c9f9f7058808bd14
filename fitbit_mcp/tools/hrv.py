import logging

from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas

logger = logging.getLogger(__name__)


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:
    """Register the Heart Rate Variability (HRV) summary tools."""

    async def get_hrv(date: str):
        endpoint = f"hrv/date/{date}.json"
        logger.debug("get_hrv %s", endpoint)
        return await handle_api_call(
            endpoint,
            {"date": date},
            get_access_token,
            error_context=f"HRV data for {date}",
        )

    async def get_hrv_by_date_range(start_date: str, end_date: str):
        endpoint = f"hrv/date/{start_date}/{end_date}.json"
        logger.debug("get_hrv_by_date_range %s", endpoint)
        return await handle_api_call(
            endpoint,
            {"start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"HRV data from {start_date} to {end_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_hrv",
        title="HRV summary",
        description=(
            "Get the raw JSON response for Heart Rate Variability (HRV) summary data from Fitbit for a single date. "
            "Returns daily RMSSD and deep sleep RMSSD values."
        ),
        parameters_schema={"date": CommonSchemas.date},
        handler=get_hrv,
    ))

    register_tool(server, ToolDescriptor(
        name="get_hrv_by_date_range",
        title="HRV summary by date range",
        description=(
            "Get the raw JSON response for Heart Rate Variability (HRV) summary data from Fitbit over a date range "
            "(max 30 days). Returns daily RMSSD and deep sleep RMSSD values for each day."
        ),
        parameters_schema={"start_date": CommonSchemas.start_date, "end_date": CommonSchemas.end_date},
        handler=get_hrv_by_date_range,
    ))
