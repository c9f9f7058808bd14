from pathlib import Path
import logging
import sys
from typing import Optional
from datetime import datetime

from fitbit_mcp.core.config import get_config

REPO_ROOT = Path(__file__).resolve().parent.parent.parent


def _resolve_logs_dir(logs_dir: Optional[str | Path]) -> Path:
    if logs_dir is None:
        logs_dir = get_config().get("logging", {}).get("dir", "logs")
    logs_dir = Path(logs_dir)
    if not logs_dir.is_absolute():
        logs_dir = REPO_ROOT / logs_dir
    return logs_dir


def setup_logging(
    logs_dir: Optional[str | Path] = None,
    log_file_name: Optional[str] = None,
    level: Optional[str | int] = None,
) -> logging.Logger:
    """Configure root logging to stderr and a timestamped file under `logs_dir`.

    stdout is reserved for the MCP stdio transport, so nothing is ever logged there.
    Idempotent: calling multiple times won't add duplicate handlers.
    Directory, file name and level default to the `logging` section of config.yaml.
    """
    log_cfg = get_config().get("logging", {})
    logs_dir = _resolve_logs_dir(logs_dir)
    if log_file_name is None:
        log_file_name = log_cfg.get("file", "server.log")
    if level is None:
        level = log_cfg.get("level", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # One file handler per process; a second call reuses it instead of opening a new timestamped file
    has_file_handler = any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve().parent == logs_dir.resolve()
        for h in root_logger.handlers
    )
    if not has_file_handler:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = Path(log_file_name).stem
        ext = Path(log_file_name).suffix or ".log"
        log_file = logs_dir / f"{base}_{timestamp}{ext}"
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            # stderr alone still works when the logs dir is read-only
            sys.stderr.write(f"Cannot write log file {log_file}: {e}\n")
        else:
            fh.setFormatter(formatter)
            fh.setLevel(level)
            root_logger.addHandler(fh)

    has_stderr_handler = any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stderr
        for h in root_logger.handlers
    )
    if not has_stderr_handler:
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(formatter)
        sh.setLevel(level)
        root_logger.addHandler(sh)

    return logging.getLogger("fitbit_mcp")
