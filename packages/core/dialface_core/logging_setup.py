"""JSON-line log files under the config root, plus crash hooks for the preview window."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root

_LOGGER_NAME = "dialface"
_LOG_FILE = "dialface.log"
_FAULT_FILE = "fault.log"
# Extra attributes copied from a record into the JSON line when present.
_EXTRA_FIELDS = ("event", "crash_id", "theme_index", "size", "duration_ms", "delay_ms")


def log_dir(root: Path | None = None) -> Path:
    path = (root or config_root()) / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update({name: getattr(record, name) for name in _EXTRA_FIELDS if hasattr(record, name)})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    level: int = logging.INFO,
    root: Path | None = None,
) -> logging.Logger:
    """Attach the rotating JSON file handler (and a console handler) once per process."""
    logger = get_logger()
    if logger.handlers:
        return logger

    logger.setLevel(level)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir(root) / _LOG_FILE),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(console_handler)

    logger.info(f"logging to {file_handler.baseFilename}", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def _log_crash(kind: str, exc_info) -> None:
    crash_id = uuid.uuid4().hex
    get_logger().critical(
        f"{kind} exception crash_id={crash_id}",
        exc_info=exc_info,
        extra={"event": f"{kind}_exception", "crash_id": crash_id},
    )


def install_crash_hooks(root: Path | None = None) -> None:
    sys.excepthook = lambda exc_type, exc, tb: _log_crash("uncaught", (exc_type, exc, tb))
    threading.excepthook = lambda args: _log_crash("thread", (args.exc_type, args.exc_value, args.exc_traceback))

    # Native crashes inside Qt never reach the Python hooks.
    fault_file = (log_dir(root) / _FAULT_FILE).open("a", encoding="utf-8")
    faulthandler.enable(file=fault_file, all_threads=True)
    get_logger().info("crash hooks installed", extra={"event": "crash_hooks_installed"})
