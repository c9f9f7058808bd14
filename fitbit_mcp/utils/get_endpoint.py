from typing import Optional

from fitbit_mcp.core.config import get_config
from fitbit_mcp.core.errors import ConfigError


def get_endpoint(path: str, api_version: Optional[str] = None) -> str:
    """Join a relative resource path onto the configured Fitbit user base URL.

    `hrv/date/2023-01-15.json` -> `https://api.fitbit.com/1/user/-/hrv/date/2023-01-15.json`
    """
    _cfg = get_config() or {}
    base_url = str(_cfg.get("fitbit_api_url", "")).rstrip("/")
    if not base_url:
        raise ConfigError("'fitbit_api_url' must be set in config.yaml")

    version = api_version or str(_cfg.get("api_version", "1"))
    user_id = str(_cfg.get("user_id", "-"))
    return f"{base_url}/{version}/user/{user_id}/{path.lstrip('/')}"
