"""``log`` section: console level and optional per-command log files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FacetSearch.config.common import expect_bool, expect_str, get_section, get_value

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging settings for CLI runs.

    Attributes:
        level: Console level name.
        to_file: Mirror DEBUG records into ``dir/<command>/``.
        dir: Base directory for log files; only used with ``to_file``.
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "log"


def load_log(raw: Mapping[str, Any]) -> LogConfig:
    """Load the optional ``log`` section; missing keys keep their defaults.

    Raises:
        TypeError: If a value has the wrong type.
        ValueError: If the level is unknown or a log directory is missing.
    """
    section = get_section(raw, "log", required=False)
    level = expect_str(get_value(section, "level", "INFO"), "log.level").strip().upper()
    if level == "WARN":
        level = "WARNING"
    if level not in _LEVELS:
        raise ValueError(f"log.level must be one of {list(_LEVELS)}")

    config = LogConfig(
        level=level,
        to_file=expect_bool(get_value(section, "to_file", False), "log.to_file"),
        dir=expect_str(get_value(section, "dir", "log"), "log.dir").strip(),
    )
    if config.to_file and not config.dir:
        raise ValueError("log.dir must not be empty when log.to_file is enabled")
    return config
