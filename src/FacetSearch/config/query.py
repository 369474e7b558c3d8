"""Query builder configuration: sorting, request handler, exact match field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FacetSearch.config.common import (
    expect_enum,
    expect_mapping,
    expect_optional_str,
    get_section,
)
from FacetSearch.core.models import SortOrder


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Settings applied to every query built from the schema.

    Attributes:
        request_handler: Named Solr request handler (``qt``), if any.
        sort: Primary sort clauses in order.
        exact_match_field: Native full-text field matched exactly in phrase
            queries.
    """

    request_handler: str | None = None
    sort: tuple[tuple[str, SortOrder], ...] = ()
    exact_match_field: str | None = None


def load_query(raw: Mapping[str, Any]) -> QueryConfig:
    """Load the ``query`` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If a sort order is unknown.
    """
    section = get_section(raw, "query", required=False)
    sort_obj = section.get("sort")
    sort: list[tuple[str, SortOrder]] = []
    if sort_obj is not None:
        for field, order in expect_mapping(sort_obj, "query.sort").items():
            sort.append((field.strip(), expect_enum(order, SortOrder, f"query.sort.{field}")))
    return QueryConfig(
        request_handler=expect_optional_str(section.get("request_handler"), "query.request_handler"),
        sort=tuple(sort),
        exact_match_field=expect_optional_str(section.get("exact_match_field"), "query.exact_match_field"),
    )


def check_query(config: QueryConfig) -> None:
    """Validate query domain constraints."""
    for field, _order in config.sort:
        if not field:
            raise ValueError("query.sort field names must not be empty")
