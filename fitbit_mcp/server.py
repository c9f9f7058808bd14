import asyncio
import logging
import pkgutil
import sys
from importlib import import_module
from pathlib import Path

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from fitbit_mcp import __version__
from fitbit_mcp.core import auth
from fitbit_mcp.core.config import missing_environment
from fitbit_mcp.core.logging_config import setup_logging
from fitbit_mcp.utils.fitbit_api import CredentialProvider

logger = logging.getLogger(__name__)

TOOLS_PACKAGE = "fitbit_mcp.tools"
ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

###################################################### MCP Tools ######################################################


def register_all_tools(mcp, get_access_token: CredentialProvider) -> list[str]:
    """Import every module under fitbit_mcp/tools and call its `register_tools`.

    Returns the names of the modules that registered tools. A module that fails to
    import or register is a startup error and is re-raised.
    """
    tools_path = Path(__file__).resolve().parent / "tools"
    registered_modules: list[str] = []
    for _finder, name, _ispkg in sorted(pkgutil.iter_modules([str(tools_path)]), key=lambda m: m.name):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        try:
            mod = import_module(module_name)
        except Exception:
            logger.exception(f"Failed to import tools module {module_name}")
            raise
        if not hasattr(mod, "register_tools"):
            logger.warning(f"Tools module {module_name} has no register_tools(); skipping")
            continue
        try:
            mod.register_tools(mcp, get_access_token)
        except Exception:
            logger.exception(f"Failed to register tools from {module_name}")
            raise
        logger.info(f"Registered tools from {module_name}")
        registered_modules.append(name)
    return registered_modules


def create_server(get_access_token: CredentialProvider = auth.get_access_token) -> FastMCP:
    mcp = FastMCP("fitbit")
    modules = register_all_tools(mcp, get_access_token)
    logger.info(f"Total tool modules registered: {len(modules)}, modules: {modules}")
    return mcp

###################################################### Startup ######################################################


async def run(mcp: FastMCP) -> None:
    await auth.initialize_auth()

    flow_task = None
    token = await auth.get_access_token()
    if not token:
        logger.info("No access token found. Starting Fitbit authorization flow...")
        flow_task = auth.start_authorization_flow()
    else:
        logger.info("Using existing/loaded access token.")

    logger.info(f"Fitbit MCP server {__version__} waiting for requests on stdio.")
    try:
        await mcp.run_stdio_async()
    finally:
        if flow_task is not None and not flow_task.done():
            flow_task.cancel()


def main() -> None:
    setup_logging()
    load_dotenv(ENV_PATH)

    missing = missing_environment()
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        logger.error(f"Create a .env file at {ENV_PATH} (see .env.example).")
        sys.exit(1)
    logger.info("Environment variables loaded successfully")

    mcp = create_server()
    try:
        asyncio.run(run(mcp))
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See logs/ for details.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
