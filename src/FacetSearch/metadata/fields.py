"""Declarative per-field search metadata for result models.

Result models are dataclasses. Each attribute that takes part in search is
declared with :func:`search_field`, which records its full-text and facet
behavior in the dataclass field metadata:

    @dataclass
    class Occurrence:
        scientific_name: str | None = search_field(
            full_text=FullTextSearchField(
                partial_matching=WildcardPadding.RIGHT,
                partial_match_score=0.5,
                exact_match_score=10.0,
                highlight=True,
            ),
        )
        country: str | None = search_field(facet=FacetField(facet="COUNTRY"))

The declarations are read once by ``FieldMetadataRegistry.build``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

from FacetSearch.core.params import SearchParameter

METADATA_KEY = "facet_search"


class WildcardPadding(Enum):
    """Side(s) on which a term is padded with ``*`` for partial matching."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"

    def pad(self, term: str) -> str:
        if self is WildcardPadding.LEFT:
            return f"*{term}"
        if self is WildcardPadding.RIGHT:
            return f"{term}*"
        if self is WildcardPadding.BOTH:
            return f"*{term}*"
        return term


class FacetSort(Enum):
    """Ordering of facet values."""

    COUNT = "count"
    INDEX = "index"


class FacetMethod(Enum):
    """Faceting algorithm used by the engine."""

    ENUM = "enum"
    FIELD_CACHE = "fc"
    FIELD_CACHE_SEGMENT = "fcs"


@dataclass(frozen=True, slots=True)
class FullTextSearchField:
    """Participation of one native field in free-text search.

    Attributes:
        field: Native field name; defaults to the attribute's native name.
        partial_matching: Wildcard padding for partial matches.
        partial_match_score: Boost applied to partial-match clauses.
        exact_match_score: Boost applied to exact-match clauses.
        highlight: Whether the field is highlighted in results.
    """

    field: str | None = None
    partial_matching: WildcardPadding = WildcardPadding.NONE
    partial_match_score: float = 1.0
    exact_match_score: float = 1.0
    highlight: bool = False


@dataclass(frozen=True, slots=True)
class FacetField:
    """Facet configuration of one native field.

    Attributes:
        facet: Bound facet constant, as a member or member name.
        field: Native field name; defaults to the attribute's native name.
        sort: Ordering of the facet values.
        missing: Whether a bucket for documents without a value is included.
        method: Faceting method.
    """

    facet: SearchParameter | str
    field: str | None = None
    sort: FacetSort = FacetSort.COUNT
    missing: bool = False
    method: FacetMethod = FacetMethod.FIELD_CACHE


@dataclass(frozen=True, slots=True)
class FieldDeclaration:
    """Everything declared for one result-model attribute."""

    native: str | None = None
    full_text: FullTextSearchField | None = None
    facet: FacetField | None = None
    parameter: SearchParameter | str | None = None


def search_field(
    *,
    native: str | None = None,
    full_text: FullTextSearchField | None = None,
    facet: FacetField | None = None,
    parameter: SearchParameter | str | None = None,
    default: Any = None,
) -> Any:
    """Declare a searchable result-model attribute.

    Args:
        native: Native (engine) field name; defaults to the attribute name.
        full_text: Free-text search participation.
        facet: Facet configuration.
        parameter: Search parameter filtering on this field. Facet fields
            without an explicit parameter are filtered by their facet constant.
        default: Attribute default value.

    Returns:
        A dataclass field carrying the declaration in its metadata.
    """
    declaration = FieldDeclaration(native=native, full_text=full_text, facet=facet, parameter=parameter)
    return dataclasses.field(default=default, metadata={METADATA_KEY: declaration})


def declaration_of(model_field: dataclasses.Field) -> FieldDeclaration | None:
    """Return the search declaration stored on a dataclass field, if any."""
    declaration = model_field.metadata.get(METADATA_KEY)
    if declaration is None:
        return None
    if not isinstance(declaration, FieldDeclaration):
        raise TypeError(f"{model_field.name}: search metadata must be a FieldDeclaration")
    return declaration
