# src/delegation_hub/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_PACKAGE = "delegation_hub"

# Console thresholds for loggers outside the package (prefix -> minimum level).
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncio": logging.WARNING,
    "py.warnings": logging.ERROR,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while a run is animating:
    package logs pass, known chatty libraries need their threshold,
    anything else needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _PACKAGE or name.startswith(_PACKAGE + "."):
            return True
        for prefix, level in _CONSOLE_THRESHOLDS.items():
            if name == prefix or name.startswith(prefix + "."):
                return record.levelno >= level
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/delegation_hub",
    app_name: str = "hub",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (stderr, filtered) plus a full debug log at
    <log_dir>/<app_name>.log. Call once, before the event loop starts.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name or 'hub'}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    for prefix in ("httpx", "httpcore"):
        logging.getLogger(prefix).setLevel(logging.WARNING)

    return log_file
