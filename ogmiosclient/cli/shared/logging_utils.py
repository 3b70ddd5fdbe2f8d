"""Loguru helpers for consistent logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from ogmiosclient.utils.helpers import get_data_path

_SINK_IDS: dict[str, int] = {}
_CONSOLE_SINK: dict[str, int] = {}


def get_log_dir() -> Path:
    return get_data_path() / "logs"


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_dir = get_log_dir()
    log_path = log_dir / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_dir.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path


def configure_console_logging(level: str = "WARNING") -> None:
    """Replace loguru's default stderr sink with one at ``level``."""
    sink_id = _CONSOLE_SINK.pop("stderr", None)
    if sink_id is None:
        logger.remove()
    else:
        logger.remove(sink_id)
    _CONSOLE_SINK["stderr"] = logger.add(sys.stderr, level=level)
