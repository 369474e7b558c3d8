"""Solr query translation for FacetSearch.

Compiles generic search requests into Solr request parameters and translates
Solr spell-check responses back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from FacetSearch.solr.builder import SolrQueryBuilder
from FacetSearch.solr.filters import FilterQueryComposer
from FacetSearch.solr.fulltext import FullTextQueryBuilder, TemplateQueryBuilder
from FacetSearch.solr.query import SolrQuery
from FacetSearch.solr.spellcheck import parse_spellcheck, translate, translate_response

if TYPE_CHECKING:
    from FacetSearch.config import AppConfig


def create_query_builder(config: AppConfig) -> SolrQueryBuilder:
    """Create a query builder for the configured schema.

    Args:
        config: Application configuration holding the schema registry.

    Returns:
        Builder with the configured sort order and request handler.
    """
    query_builder = TemplateQueryBuilder.from_registry(
        config.registry,
        exact_match_field=config.query.exact_match_field,
    )
    return SolrQueryBuilder(
        config.registry,
        query_builder,
        primary_sort_order=dict(config.query.sort),
        request_handler=config.query.request_handler,
    )


__all__ = [
    "create_query_builder",
    "FilterQueryComposer",
    "FullTextQueryBuilder",
    "SolrQuery",
    "SolrQueryBuilder",
    "TemplateQueryBuilder",
    "parse_spellcheck",
    "translate",
    "translate_response",
]
