"""
Logging configuration — set up once by the CLI entrypoint.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config.  Two destinations:

    console (stderr)   level from CLI flag > DEVCTL_LOG_LEVEL > WARNING
    log file           <data_dir>/logs/devctl.log, always DEBUG unless
                       DEVCTL_LOG_FILE_LEVEL says otherwise

``DEVCTL_LOG_FILE`` overrides the log file path.  A log file that cannot
be opened is reported on the console and skipped; it never stops a run.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: just the message
_FMT_CONSOLE = "%(message)s"

# INFO: which module said it
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG console and the log file: file:line
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAME = "devctl.log"

# Third-party loggers that are chatty at DEBUG
_NOISY_LOGGERS = ("filelock",)


def default_log_file(data_dir: Path) -> Path:
    return data_dir / "logs" / LOG_FILE_NAME


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional log file; parent directories are created.
        log_file_level: Level for the file (default DEBUG).
    """
    console_level = parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DETAIL, _DATEFMT_SHORT
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_SHORT
    else:
        fmt, datefmt = _FMT_CONSOLE, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = console_level

    if log_file is not None:
        file_level = parse_level(log_file_level, default=logging.DEBUG)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            logging.getLogger(__name__).warning("Cannot open log file %s: %s", log_file, e)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FILE))
            root.addHandler(fh)
            effective_level = min(effective_level, file_level)

    root.setLevel(effective_level)

    if console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name to its numeric constant (unknown → default)."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
