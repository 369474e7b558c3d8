"""Declarative search metadata of result models."""

from __future__ import annotations

from FacetSearch.metadata.fields import (
    FacetField,
    FacetMethod,
    FacetSort,
    FullTextSearchField,
    WildcardPadding,
    search_field,
)
from FacetSearch.metadata.registry import FieldMetadataRegistry

__all__ = [
    "FacetField",
    "FacetMethod",
    "FacetSort",
    "FieldMetadataRegistry",
    "FullTextSearchField",
    "WildcardPadding",
    "search_field",
]
