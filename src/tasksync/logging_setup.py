# src/tasksync/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that run behind the console prompt; only problems reach the terminal.
_BACKGROUND_PREFIXES = ("tasksync.sync.", "tasksync.storage.kv")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console-only filter. The file handler still gets everything.

    tasksync records pass, except background sync/storage records below
    WARNING. Everything else (httpx, uvicorn, py.warnings) needs ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("tasksync."):
            return record.levelno >= logging.ERROR
        if name.startswith(_BACKGROUND_PREFIXES):
            return record.levelno >= logging.WARNING
        return True


def _reset_root(level: int) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    return root


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasksync",
    log_name: str = "tasksync.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Install a filtered stderr handler and a full log file at log_dir/log_name.

    Replaces existing root handlers, so calling it twice does not duplicate output.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)
    root = _reset_root(logging.DEBUG)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    log_file = logging.FileHandler(str(log_path / log_name), encoding="utf-8")
    log_file.setLevel(file_level)
    log_file.setFormatter(formatter)
    root.addHandler(log_file)

    logging.captureWarnings(True)


def quiet_http_loggers(level: int = logging.WARNING) -> None:
    """httpx and uvicorn log every request at INFO; raise their threshold."""
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
