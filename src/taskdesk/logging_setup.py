# src/taskdesk/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


# Chatty below WARNING: schema setup, per-key writes, snapshot file I/O.
_QUIET_BELOW_WARNING = ("taskdesk.storage", "taskdesk.backup", "taskdesk.tasks")


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares stderr with the REPL prompt, so it only gets:
    - account, session and command logs from taskdesk
    - storage/backup/task-store logs at WARNING+ (the file keeps the rest)
    - anything else (py.warnings, sqlite3, dotenv) at ERROR+
    """

    def __init__(self, quiet_prefixes: tuple[str, ...] = _QUIET_BELOW_WARNING) -> None:
        super().__init__()
        self._quiet_prefixes = quiet_prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(self._quiet_prefixes):
            return record.levelno >= logging.WARNING

        if name == "taskdesk" or name.startswith("taskdesk."):
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdesk",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered, quiet by default so it does not interleave with the REPL
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskdesk.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
