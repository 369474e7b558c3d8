"""Validators shared by the config sections.

Every validator takes the full key path of the value (``schema.fields.year.facet``)
and puts it in the error it raises, so a broken YAML file can be fixed without
reading code.
"""

from __future__ import annotations

import keyword
import math
from enum import Enum
from typing import Any, Mapping, TypeVar

E = TypeVar("E", bound=Enum)


def get_section(raw: Mapping[str, Any], key: str, *, required: bool, parent: str | None = None) -> Mapping[str, Any]:
    """Return the mapping stored under ``key``.

    Args:
        raw: Mapping holding the section.
        key: Section name.
        required: Whether a missing section is an error.
        parent: Key path of ``raw`` itself, for nested sections.

    Returns:
        The section, or an empty mapping for a missing optional section.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    path = f"{parent}.{key}" if parent else key
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {path}")
        return {}
    return expect_mapping(section, path)


def get_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    """Return ``section[field]``; missing keys and YAML nulls give ``default``."""
    value = section.get(field)
    return default if value is None else value


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_optional_str(value: Any, config_key: str) -> str | None:
    """Validate a string that may be null; blank strings become None."""
    if value is None:
        return None
    return expect_str(value, config_key).strip() or None


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_score(value: Any, config_key: str) -> float:
    """Validate a query boost: a finite, non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    score = float(value)
    if not math.isfinite(score) or score < 0:
        raise ValueError(f"{config_key} must be a non-negative number")
    return score


def expect_identifier(value: Any, config_key: str) -> str:
    """Validate a name that becomes a Python identifier (enum member, attribute, class)."""
    name = expect_str(value, config_key).strip()
    if not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
        raise ValueError(f"{config_key} must be a valid identifier not starting with '_': {name!r}")
    return name


def expect_identifier_list(value: Any, config_key: str) -> list[str]:
    """Validate a non-empty list of distinct identifiers."""
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    names = [expect_identifier(item, f"{config_key}[{idx}]") for idx, item in enumerate(value)]
    if not names:
        raise ValueError(f"{config_key} must include at least one value")
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"{config_key} has duplicate values: {duplicates}")
    return names


def expect_mapping(value: Any, config_key: str) -> Mapping[str, Any]:
    """Validate an object whose keys are strings."""
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")
    for key in value:
        if not isinstance(key, str):
            raise TypeError(f"{config_key} keys must be strings")
    return value


def expect_enum(value: Any, enum_type: type[E], config_key: str) -> E:
    """Parse an enum member from its name or value, case-insensitively."""
    text = expect_str(value, config_key).strip().lower()
    for member in enum_type:
        if member.name.lower() == text or str(member.value).lower() == text:
            return member
    allowed = sorted(member.name.lower() for member in enum_type)
    raise ValueError(f"{config_key} must be one of {allowed}")
