"""Structured local logging and crash hook setup."""

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
from typing import Any, TextIO

from .config import config_root


_LOGGER_NAME = "dropper"
# Keys callers pass through ``extra=`` that end up in the JSON line.
_EXTRA_FIELDS = ("event", "crash_id", "generation", "media_type", "x", "y", "width", "height")
_fault_file: TextIO | None = None


def log_dir() -> Path:
    path = config_root() / "logs"
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
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    directory: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Attach a daily-rotating JSON file handler (and optionally stderr) once."""
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    target = directory or log_dir()
    target.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(target / "dropper.log"),
        when="midnight",
        backupCount=max(1, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def _enable_fault_handler(logger: logging.Logger, directory: Path) -> None:
    global _fault_file
    if _fault_file is None:
        _fault_file = (directory / "fault.log").open("a", encoding="utf-8")
    faulthandler.enable(file=_fault_file, all_threads=True)
    logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})


def install_crash_hooks(directory: Path | None = None) -> None:
    """Route uncaught exceptions (main and worker threads) into the log with a crash id."""
    logger = get_logger()

    def _report(kind: str, exc_info: Any) -> None:
        crash_id = str(uuid.uuid4())
        logger.critical(
            f"{kind} crash_id={crash_id}",
            exc_info=exc_info,
            extra={"event": kind.replace(" ", "_"), "crash_id": crash_id},
        )

    def _main_hook(exc_type, exc_value, exc_tb) -> None:
        _report("uncaught exception", (exc_type, exc_value, exc_tb))

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        _report("thread exception", (args.exc_type, args.exc_value, args.exc_traceback))

    sys.excepthook = _main_hook
    threading.excepthook = _thread_hook
    _enable_fault_handler(logger, directory or log_dir())
