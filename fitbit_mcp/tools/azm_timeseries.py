from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool
from fitbit_mcp.utils.schemas import CommonSchemas


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:

    async def get_azm_timeseries(start_date: str, end_date: str):
        return await handle_api_call(
            f"activities/active-zone-minutes/date/{start_date}/{end_date}.json",
            {"start_date": start_date, "end_date": end_date},
            get_access_token,
            error_context=f"Active Zone Minutes from {start_date} to {end_date}",
        )

    register_tool(server, ToolDescriptor(
        name="get_azm_timeseries",
        title="Active Zone Minutes",
        description=(
            "Get the raw JSON response for Active Zone Minutes (AZM) from Fitbit over a date range "
            "(max 1095 days). Returns fat burn, cardio and peak zone minutes per day."
        ),
        parameters_schema={"start_date": CommonSchemas.start_date, "end_date": CommonSchemas.end_date},
        handler=get_azm_timeseries,
    ))
