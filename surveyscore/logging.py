"""Logging for CLI runs.

Each command configures two handlers on the root logger:

- stderr, at WARNING (DEBUG with ``--verbose``).  Unreadable state files and
  truncated CSV imports surface here.
- ``<output_dir>/.surveyscore/surveyscore.log``, at the ``log_level`` setting
  (``SURVEYSCORE_LOG_LEVEL``, default INFO).  Resets are logged at INFO;
  state writes and scoring summaries at DEBUG.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIRNAME = ".surveyscore"
LOG_FILENAME = "surveyscore.log"

# A session log is small; keep a few hundred KB of history
_MAX_BYTES = 256 * 1024
_BACKUP_COUNT = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def log_path(output_dir: Path) -> Path:
    return output_dir / LOG_DIRNAME / LOG_FILENAME


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    return handler


def _file_handler(output_dir: Path, level: str) -> logging.Handler:
    path = log_path(output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    output_dir: Path | None = None,
    verbose: bool = False,
    file_level: str = "INFO",
) -> None:
    """Replace the root logger's handlers with the surveyscore pair.

    Args:
        output_dir: Directory that holds exports; the log file is written
            under it.  ``None`` configures the terminal handler only.
        verbose: Show DEBUG messages on stderr.
        file_level: Level name for the log file, as validated by
            ``SurveyScoreSettings.log_level``.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    # Handlers filter; the root passes everything through
    root.setLevel(logging.DEBUG)
    root.addHandler(_terminal_handler(verbose))
    if output_dir is not None:
        root.addHandler(_file_handler(output_dir, file_level))
