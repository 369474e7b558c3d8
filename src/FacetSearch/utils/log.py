"""Logging for FacetSearch.

FacetSearch is mostly used as a library, so the ``FacetSearch`` logger only
carries a ``NullHandler`` until an application (or the CLI) calls
``configure_logging``. Records then look like::

    05-03 14:02:11 [WARN] build: COUNTRY2 is no valid facet. Ignore
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final, TextIO


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

# Marks handlers owned by configure_logging; anything else attached to the
# logger belongs to the embedding application.
_OWNED_ATTR: Final = "_facet_search_owned"


class _ActionFormatter(logging.Formatter):
    """Prefix records with an abbreviated level and the running action."""

    def __init__(self, action: str | None) -> None:
        prefix = f"{action}: " if action else ""
        super().__init__(
            fmt=f"%(asctime)s [%(levelabbr)s] {prefix}%(message)s",
            datefmt="%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("FacetSearch")
log.addHandler(logging.NullHandler())


def log_file_path(log_dir: str | Path, action: str, now: datetime | None = None) -> Path:
    """Return ``<log_dir>/<action>/<action>_<mmddHHMMSS>.log``."""
    timestamp = (now or datetime.now()).strftime("%m%d%H%M%S")
    return Path(log_dir) / action / f"{action}_{timestamp}.log"


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str | Path = "log",
    stream: TextIO | None = None,
) -> Path | None:
    """Attach console (and optionally file) handlers to the FacetSearch logger.

    Calling it again replaces the handlers of the previous call; handlers
    added by other code are left alone.

    Args:
        level: Console level name (e.g. INFO, DEBUG).
        action: Name of the running command, shown in every record and used
            for the log file location.
        log_to_file: Also write DEBUG records to ``log_file_path``. Needs
            ``action``.
        log_dir: Base directory for log files.
        stream: Console stream; stderr by default so stdout stays free for
            command output.

    Returns:
        Path of the log file, if one was opened.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _ActionFormatter(action)

    for handler in [h for h in log.handlers if getattr(h, _OWNED_ATTR, False)]:
        log.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    console = logging.StreamHandler(stream)
    console.setLevel(resolved_level)
    handlers.append(console)

    file_path = None
    if log_to_file and action:
        file_path = log_file_path(log_dir, action)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        log.addHandler(handler)

    log.setLevel(logging.DEBUG if file_path else resolved_level)
    log.propagate = False
    return file_path
