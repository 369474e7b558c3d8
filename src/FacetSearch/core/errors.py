"""Error types raised by the query translation layer."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Field metadata is malformed or inconsistent.

    Raised while a registry or builder is being constructed, never while a
    request is being translated.
    """


class ValueCoercionError(ValueError):
    """A filter value cannot be interpreted as its parameter's type."""

    def __init__(self, value: str, value_type: type, reason: str | None = None) -> None:
        self.value = value
        self.value_type = value_type
        message = f"{value!r} cannot be interpreted as {getattr(value_type, '__name__', value_type)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
