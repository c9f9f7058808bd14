from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, ToolHost, handle_api_call, register_tool


def register_tools(server: ToolHost, get_access_token: CredentialProvider) -> None:

    async def get_profile():
        return await handle_api_call("profile.json", {}, get_access_token, error_context="profile data")

    register_tool(server, ToolDescriptor(
        name="get_profile",
        title="User profile",
        description="Get the raw JSON response for the authorized user's Fitbit profile.",
        parameters_schema={},
        handler=get_profile,
    ))
