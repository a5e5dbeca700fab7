"""Logging configuration shared by the task service, gateway and CLI."""
from __future__ import annotations

import logging
import sys
import typing as t
from pathlib import Path

# Top-level packages whose records always reach the console
OWN_PACKAGES = ("task_server", "task_calendar", "services", "mcp_wrappers", "mcp_gateway", "cli", "__main__")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - our own loggers pass at the handler level
    - uvicorn access/error logs pass at INFO and above
    - any other third party only at WARNING and above
    """

    def filter(self, record: logging.LogRecord) -> bool:
        root_name = record.name.split(".", 1)[0]
        if root_name in OWN_PACKAGES:
            return True
        if root_name == "uvicorn":
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: t.Union[int, str] = logging.INFO,
    log_dir: t.Optional[t.Union[str, Path]] = None,
    stream: t.TextIO = sys.stderr,
) -> None:
    """
    Configure the root logger with:
    - Console handler: filtered for third-party noise
    - File handler (only when log_dir is given): everything at DEBUG

    Call this once at process start; calling it again replaces the handlers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_dir else level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(stream)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "task_service.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
