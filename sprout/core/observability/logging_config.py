"""
Logging configuration — one-time setup for the CLI process.

Diagnostics go through ``logging`` (stderr, optional file); user-facing
progress goes through the Reporter and is not affected by these levels.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  SPROUT_LOG_LEVEL  >  WARNING

The optional log file (SPROUT_LOG_FILE) always gets full detail at
SPROUT_LOG_FILE_LEVEL, or the console level when unset.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LEVEL_ENV_VAR = "SPROUT_LOG_LEVEL"
FILE_ENV_VAR = "SPROUT_LOG_FILE"
FILE_LEVEL_ENV_VAR = "SPROUT_LOG_FILE_LEVEL"

# Console formats widen with verbosity
_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_DEFAULT = "%(levelname)s: %(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Libraries that chatter below WARNING
_NOISY_LOGGERS = ("urllib3", "asyncio")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; its directory is created.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Keep noisy libraries at WARNING unless debugging.
    """
    numeric_level = _parse_level(level)
    fmt, datefmt = _FORMATS.get(numeric_level, (_FMT_DEFAULT, None))

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(file_handler)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant, WARNING for anything unknown."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
