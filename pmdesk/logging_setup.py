"""Logging setup for pmdesk.

Logs go to a rotating file under the XDG state directory; the terminal
UI owns stdout, so console output is opt-in for the CLI.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_NAME = "pmdesk"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_dir() -> Path:
    base = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    log_dir = Path(base) / APP_NAME / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def setup_logging(level_name: Optional[str] = None, console: bool = False) -> Path:
    """Configure the root logger.

    Args:
        level_name: DEBUG/INFO/WARNING/ERROR. Defaults to PMDESK_LOG_LEVEL,
            then INFO.
        console: Also log to stderr.

    Returns:
        Path of the log file.
    """
    level_name = (level_name or os.environ.get("PMDESK_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logfile = get_log_dir() / f"{APP_NAME}.log"
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    # Repeated calls (tests, CLI re-entry) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, "_pmdesk", False):
            root.removeHandler(handler)
            handler.close()

    # File: rotate at 5MB, keep 7 backups
    fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=7, encoding="utf-8")
    fh.setFormatter(formatter)
    fh.setLevel(level)
    fh._pmdesk = True  # type: ignore[attr-defined]
    root.addHandler(fh)

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(formatter)
        ch.setLevel(level)
        ch._pmdesk = True  # type: ignore[attr-defined]
        root.addHandler(ch)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(f"Logging initialized at {level_name}; file: {logfile}")
    return logfile
