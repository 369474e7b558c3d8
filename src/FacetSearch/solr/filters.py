"""Filter query composition.

Each search parameter of a request becomes at most one ``fq`` entry holding
its values OR-combined; separate entries are AND-combined by Solr:

    COUNTRY=[US, -CA], YEAR=[1990,2000]
    -> (country:US OR NOT country:CA)
    -> (year:[1990 TO 2000])

Raw values are coerced according to the parameter's value type. A value that
cannot be coerced raises ``ValueCoercionError``; unknown parameters are
dropped with a warning.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, Mapping

from dateutil import parser as dt_parser

from FacetSearch.core.errors import ValueCoercionError
from FacetSearch.core.models import iter_parameters
from FacetSearch.core.params import SearchParameter
from FacetSearch.metadata.registry import FieldMetadataRegistry
from FacetSearch.solr.constants import (
    FACET_FILTER_TAG,
    MATCH_ALL,
    NEGATION_MARKER,
    NOT_OP,
    RANGE_FORMAT,
    RANGE_SEPARATOR,
)
from FacetSearch.solr.fulltext import escape_query_chars, quote
from FacetSearch.solr.query import join_or
from FacetSearch.utils.log import log

_RE_WHITESPACE = re.compile(r"\s")
# Components that differ between the two parses were not given.
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2, 1, 1, 1))
_DATE_FIELDS = ("year", "month", "day", "hour", "minute", "second")
_DATE_UNITS = ("YEAR", "MONTH", "DAY", "HOUR", "MINUTE", "SECOND")
_TRUE = frozenset({"true", "yes", "1"})
_FALSE = frozenset({"false", "no", "0"})


class FilterQueryComposer:
    """Turns request parameters into Solr filter queries for one registry."""

    def __init__(self, registry: FieldMetadataRegistry) -> None:
        self._registry = registry

    def compose(
        self,
        parameters: Mapping[SearchParameter, Iterable[str]] | None,
        *,
        faceted: bool = False,
    ) -> list[str]:
        """Compose one filter query per known parameter.

        Args:
            parameters: Parameter → raw values.
            faceted: Tag every entry with its native field so facet counts
                can exclude it (multi-select faceting).

        Returns:
            Filter queries in parameter iteration order.

        Raises:
            ValueCoercionError: If a value cannot be interpreted as its
                parameter's type.
        """
        filter_queries: list[str] = []
        for parameter, values in iter_parameters(parameters):
            if not isinstance(parameter, self._registry.parameter_enum):
                log.warning("Unknown search parameter %s", parameter)
                continue
            native = self._registry.field_for(parameter)
            if native is None:
                log.warning("Unknown search parameter %s", parameter)
                continue

            clauses: list[str] = []
            for raw in values:
                clause = filter_clause(native, parameter.value_type, raw)
                if clause is None:
                    log.debug("Ignoring blank value for search parameter %s", parameter.name)
                    continue
                clauses.append(clause)

            if clauses:
                filter_queries.append(build_filter_query(native, clauses, tagged=faceted))
        return filter_queries


def filter_clause(native: str, value_type: type, raw: str) -> str | None:
    """Build ``field:literal`` for one raw value, honoring negation.

    Returns:
        The clause, or None for a blank value.
    """
    value = raw.strip()
    negated = is_negated(value)
    if negated:
        value = remove_negation(value)
    if not value:
        return None
    clause = f"{native}:{interpret_value(value_type, value)}"
    return NOT_OP + clause if negated else clause


def build_filter_query(native: str, clauses: Iterable[str], *, tagged: bool) -> str:
    """OR-join clauses, prefixed with the exclusion tag of ``native`` if tagged."""
    expression = join_or(clauses)
    if tagged:
        return f"{{!tag={facet_tag(native)}}}{expression}"
    return expression


def facet_tag(native: str) -> str:
    return FACET_FILTER_TAG + native


def tagged_facet_field(native: str) -> str:
    """Facet field that excludes the filter tagged for the same native field."""
    return f"{{!ex={facet_tag(native)}}}{native}"


def is_negated(value: str) -> bool:
    return value.startswith(NEGATION_MARKER)


def remove_negation(value: str) -> str:
    return value[len(NEGATION_MARKER):].strip() if is_negated(value) else value


def interpret_value(value_type: type, value: str) -> str:
    """Coerce a raw value into Solr literal syntax for ``value_type``.

    Raises:
        ValueCoercionError: If the value cannot be interpreted.
    """
    if issubclass(value_type, Enum):
        return _interpret_enum(value_type, value)
    if issubclass(value_type, bool):
        return _interpret_bool(value)
    if issubclass(value_type, (int, float)):
        return _interpret_number(value_type, value)
    if issubclass(value_type, date):
        return _interpret_date(value)
    return _interpret_str(value)


def _interpret_str(value: str) -> str:
    if value == MATCH_ALL:
        return value
    if _RE_WHITESPACE.search(value):
        return quote(value)
    return escape_query_chars(value)


def _interpret_enum(value_type: type[Enum], value: str) -> str:
    key = value.strip().upper()
    for member in value_type:
        if member.name.upper() == key or str(member.value).upper() == key:
            return member.name
    raise ValueCoercionError(value, value_type, f"expected one of {[m.name for m in value_type]}")


def _interpret_bool(value: str) -> str:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return "true"
    if normalized in _FALSE:
        return "false"
    raise ValueCoercionError(value, bool)


def _interpret_number(value_type: type, value: str) -> str:
    if RANGE_SEPARATOR in value:
        lower, upper = _split_range(value, value_type)
        return RANGE_FORMAT.format(_number_bound(value_type, lower, value), _number_bound(value_type, upper, value))
    return _number(value_type, value.strip(), value)


def _number_bound(value_type: type, bound: str, raw: str) -> str:
    if not bound or bound == MATCH_ALL:
        return MATCH_ALL
    return _number(value_type, bound, raw)


def _number(value_type: type, text: str, raw: str) -> str:
    try:
        if issubclass(value_type, int):
            return str(int(text))
        number = float(text)
    except ValueError as error:
        raise ValueCoercionError(raw, value_type) from error
    if not math.isfinite(number):
        raise ValueCoercionError(raw, value_type, "not a finite number")
    return str(number)


def _interpret_date(value: str) -> str:
    # The upper end covers the whole unit it was given in, e.g. a day or a year.
    if RANGE_SEPARATOR in value:
        lower, upper = _split_range(value, date)
        lower_bound = _date_bound(lower, value)
        if not upper or upper == MATCH_ALL:
            return RANGE_FORMAT.format(lower_bound, MATCH_ALL)
        instant, unit = _date(upper, value)
    else:
        instant, unit = _date(value.strip(), value)
        lower_bound = instant
    return f"[{lower_bound} TO {instant}+1{unit}}}"


def _date_bound(bound: str, raw: str) -> str:
    if not bound or bound == MATCH_ALL:
        return MATCH_ALL
    return _date(bound, raw)[0]


def _date(text: str, raw: str) -> tuple[str, str]:
    """Return the UTC instant of ``text`` and the finest unit it was given in."""
    try:
        first, second = (dt_parser.parse(text, default=default) for default in _DATE_DEFAULTS)
    except (ValueError, OverflowError) as error:
        raise ValueCoercionError(raw, date) from error
    given = [getattr(first, unit) == getattr(second, unit) for unit in _DATE_FIELDS]
    if not given[0]:
        raise ValueCoercionError(raw, date, "no year given")
    unit = _DATE_UNITS[given.index(False) - 1] if False in given else _DATE_UNITS[-1]
    if first.tzinfo is not None:
        first = first.astimezone(timezone.utc).replace(tzinfo=None)
    return first.strftime("%Y-%m-%dT%H:%M:%SZ"), unit


def _split_range(value: str, value_type: type) -> tuple[str, str]:
    parts = [part.strip() for part in value.split(RANGE_SEPARATOR)]
    if len(parts) != 2:
        raise ValueCoercionError(value, value_type, "range must be 'lower,upper'")
    return parts[0], parts[1]
