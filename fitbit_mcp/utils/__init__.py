from fitbit_mcp.utils.fitbit_api import CredentialProvider, ToolDescriptor, handle_api_call, register_tool
from fitbit_mcp.utils.response_utils import ResponseEnvelope, text_envelope, to_json_text
from fitbit_mcp.utils.schemas import CommonSchemas, DateRangeBound, EnumChoice, IntegerRange, StringPattern

__all__ = [
    "CommonSchemas",
    "CredentialProvider",
    "DateRangeBound",
    "EnumChoice",
    "IntegerRange",
    "ResponseEnvelope",
    "StringPattern",
    "ToolDescriptor",
    "handle_api_call",
    "register_tool",
    "text_envelope",
    "to_json_text",
]
