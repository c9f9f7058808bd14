import copy
import os
import yaml

from fitbit_mcp.core.errors import ConfigError

CONFIG_PATH_ENV = "FITBIT_MCP_CONFIG"
REQUIRED_ENV_VARS = ("FITBIT_CLIENT_ID", "FITBIT_CLIENT_SECRET")

DEFAULT_CONFIG = {
    "fitbit_api_url": "https://api.fitbit.com",
    "api_version": "1",
    "user_id": "-",
    "request_timeout": 30.0,
    "oauth": {
        "authorize_url": "https://www.fitbit.com/oauth2/authorize",
        "token_url": "https://api.fitbit.com/oauth2/token",
        "redirect_host": "localhost",
        "redirect_port": 3000,
        "redirect_path": "/callback",
        "scopes": [
            "activity",
            "heartrate",
            "nutrition",
            "profile",
            "sleep",
            "weight",
        ],
        "token_file": ".fitbit-token.json",
    },
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "file": "server.log",
    },
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    _instance = None
    _config = None

    def __new__(cls):
        """
        Create a singleton instance of ConfigLoader.
        Loads configuration from YAML file on first instantiation.
        """
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._load_config()
        return cls._instance

    @classmethod
    def config_path(cls):
        """
        Path of the YAML file: $FITBIT_MCP_CONFIG, else config.yaml at the repository root.
        """
        override = os.getenv(CONFIG_PATH_ENV)
        if override:
            return os.path.abspath(override)
        return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "config.yaml"))

    @classmethod
    def _load_config(cls):
        """
        Load the YAML file on top of DEFAULT_CONFIG into the class variable _config.
        A missing file leaves the defaults in place.
        """
        path = cls.config_path()
        loaded = {}
        if os.path.isfile(path):
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigError(f"{path} must contain a mapping at the top level")
        cls._config = _merge(DEFAULT_CONFIG, loaded)

    @classmethod
    def reset(cls):
        """
        Drop the cached instance so the next access reloads the file.
        """
        cls._instance = None
        cls._config = None

    def get_config(self):
        """
        Return the loaded configuration dictionary.
        """
        return self._config


def get_config():
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()


def missing_environment(names=REQUIRED_ENV_VARS):
    return [name for name in names if not os.getenv(name)]


def validate_environment():
    missing = missing_environment()
    if missing:
        raise ConfigError("Missing required environment variables: " + ", ".join(missing))


def get_client_credentials():
    """
    Return (client_id, client_secret) from the environment.
    """
    validate_environment()
    return os.environ["FITBIT_CLIENT_ID"], os.environ["FITBIT_CLIENT_SECRET"]
