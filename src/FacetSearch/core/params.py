"""Search parameter enumerations.

A search parameter names one filterable/facetable dimension of a result model
and carries the Python type its raw string values are interpreted as:

    class OccurrenceSearchParameter(SearchParameter):
        COUNTRY = Country
        YEAR = int
        EVENT_DATE = date
        CATALOG_NUMBER = str

Supported value types are ``str``, ``int``, ``float``, ``bool``,
``datetime.date`` (or ``datetime.datetime``) and any ``Enum`` subclass.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping

_SCALAR_TYPES: frozenset[type] = frozenset({str, int, float, bool, date})

# Names accepted in configuration files for scalar parameter types.
VALUE_TYPE_NAMES: Mapping[str, type] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "double": float,
    "bool": bool,
    "boolean": bool,
    "date": date,
}


def is_supported_value_type(value_type: Any) -> bool:
    """Return True if ``value_type`` can be used as a parameter value type."""
    if not isinstance(value_type, type):
        return False
    if issubclass(value_type, Enum):
        return True
    return any(issubclass(value_type, t) for t in _SCALAR_TYPES)


class SearchParameter(Enum):
    """Base enumeration for search parameters.

    Member values are value types; members are numbered automatically so two
    parameters of the same type never alias each other.
    """

    def __new__(cls, value_type: type = str) -> SearchParameter:
        if not is_supported_value_type(value_type):
            raise TypeError(f"Unsupported search parameter type: {value_type!r}")
        obj = object.__new__(cls)
        obj._value_ = len(cls.__members__) + 1
        obj.value_type = value_type
        return obj

    @classmethod
    def lookup(cls, name: str) -> SearchParameter | None:
        """Return the member called ``name`` (case-insensitive), or None."""
        key = name.strip().upper()
        for member in cls:
            if member.name.upper() == key:
                return member
        return None


def make_parameter_enum(name: str, members: Mapping[str, type]) -> type[SearchParameter]:
    """Create a ``SearchParameter`` enumeration from a name → type mapping."""
    return SearchParameter(name, [(member, value_type) for member, value_type in members.items()])
