from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from FacetSearch.core.params import SearchParameter


class SortOrder(Enum):
    """Direction of one primary sort clause."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str) -> SortOrder:
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized or member.name.lower() == normalized:
                return member
        raise ValueError(f"Unknown sort order: {value}")


@dataclass(frozen=True, slots=True)
class Page:
    """Offset/limit paging window."""

    offset: int = 0
    limit: int = 20


@dataclass(slots=True)
class SearchRequest:
    """Generic search request built by the calling application.

    Attributes:
        q: Free-text query string. Empty or ``*`` matches everything.
        parameters: Search parameter → raw string values. A value prefixed
            with ``-`` is a negated filter.
        offset: Paging offset; the builder default applies when None.
        limit: Paging limit; the builder default applies when None.
        highlight: Whether highlighting is requested.
        spell_check: Whether spell-check suggestions are requested.
        spell_check_count: Number of suggestions per misspelled term.
    """

    q: str | None = None
    parameters: dict[SearchParameter, list[str]] = field(default_factory=dict)
    offset: int | None = None
    limit: int | None = None
    highlight: bool = False
    spell_check: bool = False
    spell_check_count: int | None = None

    def add_parameter(self, parameter: SearchParameter, *values: object) -> None:
        """Append values for a parameter, keeping insertion order."""
        bucket = self.parameters.setdefault(parameter, [])
        for value in values:
            if value is None:
                continue
            bucket.append(value.name if isinstance(value, Enum) else str(value))


@dataclass(slots=True)
class FacetedSearchRequest(SearchRequest):
    """Search request that also asks for facet counts.

    Attributes:
        facets: Facets to compute, drawn from the search parameter enumeration.
        facet_pages: Optional per-facet paging.
        facet_min_count: Global minimum count for a facet value to be listed.
        facet_limit: Global maximum number of values per facet.
        facet_offset: Global offset into the values of every facet.
        multi_select_facets: Exclude each facet's own filter when counting it.
    """

    facets: list[SearchParameter] = field(default_factory=list)
    facet_pages: dict[SearchParameter, Page] = field(default_factory=dict)
    facet_min_count: int | None = None
    facet_limit: int | None = None
    facet_offset: int | None = None
    multi_select_facets: bool = False

    def add_facets(self, *facets: SearchParameter) -> None:
        for facet in facets:
            if facet not in self.facets:
                self.facets.append(facet)

    def facet_page(self, facet: SearchParameter) -> Page | None:
        return self.facet_pages.get(facet)


@dataclass(frozen=True, slots=True)
class Suggestion:
    """Spelling alternatives for one token (or a whole collated query)."""

    num_found: int
    alternatives: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "alternatives", tuple(self.alternatives))


@dataclass(frozen=True, slots=True)
class SpellCheckResponse:
    """Engine-agnostic spell-check result.

    Attributes:
        correctly_spelled: Whether the engine considered the query correct.
        suggestions: Original token(s) → suggestion.
    """

    correctly_spelled: bool
    suggestions: Mapping[str, Suggestion] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "suggestions", MappingProxyType(dict(self.suggestions)))


def iter_parameters(
    parameters: Mapping[SearchParameter, Iterable[str]] | None,
) -> Iterable[tuple[SearchParameter, list[str]]]:
    """Yield ``(parameter, values)`` pairs, skipping empty input.

    A single string value counts as one value, not as a sequence of characters.
    """
    if not parameters:
        return
    for parameter, values in parameters.items():
        if isinstance(values, str):
            values = [values]
        yield parameter, [str(v) for v in (values or ())]
