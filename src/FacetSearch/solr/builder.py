"""Solr query assembly.

``SolrQueryBuilder`` turns a ``SearchRequest``/``FacetedSearchRequest`` into a
``SolrQuery``: free-text clause, paging, filters, highlighting, sorting,
request handler, spell checking and facets.

Building is not thread safe while the sort order or request handler are being
reconfigured. ``duplicate()`` returns an independent copy of that per-request
state for each concurrent user; the registry and the full-text templates are
shared read-only.
"""

from __future__ import annotations

from typing import Mapping

from FacetSearch.core.models import FacetedSearchRequest, SearchRequest, SortOrder
from FacetSearch.core.params import SearchParameter
from FacetSearch.metadata.registry import FieldMetadataRegistry
from FacetSearch.solr.constants import (
    ALT_QUERY_PARAM,
    DEFAULT_FACET_COUNT,
    DEFAULT_FACET_METHOD,
    DEFAULT_FACET_MISSING,
    DEFAULT_FACET_SORT,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_QUERY,
    DEFAULT_SPELL_CHECK_COUNT,
    HL_FRAGMENT_SIZE,
    NUM_HL_SNIPPETS,
)
from FacetSearch.solr.filters import FilterQueryComposer, tagged_facet_field
from FacetSearch.solr.fulltext import FullTextQueryBuilder, TemplateQueryBuilder
from FacetSearch.solr.query import SolrQuery
from FacetSearch.utils.log import log


class SolrQueryBuilder:
    """Builds ``SolrQuery`` objects for one result model."""

    def __init__(
        self,
        registry: FieldMetadataRegistry,
        query_builder: FullTextQueryBuilder,
        *,
        primary_sort_order: Mapping[str, SortOrder | str] | None = None,
        request_handler: str | None = None,
    ) -> None:
        self.registry = registry
        self.query_builder = query_builder
        self._filters = FilterQueryComposer(registry)
        self.primary_sort_order: dict[str, SortOrder] = {}
        self.request_handler: str | None = None
        self.with_primary_sort_order(primary_sort_order)
        self.with_request_handler(request_handler)

    @classmethod
    def create(
        cls,
        model: type,
        parameter_enum: type[SearchParameter],
        *,
        exact_match_field: str | None = None,
    ) -> SolrQueryBuilder:
        """Build the registry and full-text templates of ``model``.

        Raises:
            ConfigurationError: If the model's declarations are inconsistent.
        """
        registry = FieldMetadataRegistry.build(model, parameter_enum)
        query_builder = TemplateQueryBuilder.from_registry(registry, exact_match_field=exact_match_field)
        return cls(registry, query_builder)

    def with_primary_sort_order(self, primary_sort_order: Mapping[str, SortOrder | str] | None) -> SolrQueryBuilder:
        """Set the sort clauses applied to every query, in mapping order."""
        self.primary_sort_order = {
            field: order if isinstance(order, SortOrder) else SortOrder.parse(order)
            for field, order in (primary_sort_order or {}).items()
        }
        return self

    def with_query_builder(self, query_builder: FullTextQueryBuilder) -> SolrQueryBuilder:
        self.query_builder = query_builder
        return self

    def with_request_handler(self, request_handler: str | None) -> SolrQueryBuilder:
        """Set the named request handler, e.g. one configured for distributed search."""
        self.request_handler = request_handler or None
        return self

    def duplicate(self) -> SolrQueryBuilder:
        """Return a copy with its own sort order and request handler."""
        return SolrQueryBuilder(
            self.registry,
            self.query_builder,
            primary_sort_order=dict(self.primary_sort_order),
            request_handler=self.request_handler,
        )

    def build(self, request: SearchRequest) -> SolrQuery:
        """Assemble ``request``, including facets when it is faceted."""
        if isinstance(request, FacetedSearchRequest):
            return self.assemble_faceted(request)
        return self.assemble(request)

    def assemble(self, request: SearchRequest) -> SolrQuery:
        """Assemble the non-facet part of a query.

        Raises:
            ValueCoercionError: If a filter value does not match its
                parameter's type.
        """
        solr_query = SolrQuery(self.query_builder.build(request.q))
        solr_query.set_paging(
            request.offset if request.offset is not None else DEFAULT_OFFSET,
            request.limit if request.limit is not None else DEFAULT_LIMIT,
        )
        solr_query.set(ALT_QUERY_PARAM, DEFAULT_QUERY)

        multi_select = isinstance(request, FacetedSearchRequest) and request.multi_select_facets
        filter_queries = self._filters.compose(request.parameters, faceted=multi_select)
        if filter_queries:
            solr_query.add_filter_query(*filter_queries)

        self._set_highlight_params(request, solr_query)
        self._set_primary_sort_order(solr_query)
        solr_query.set_request_handler(self.request_handler)
        self._set_spell_check_params(request, solr_query)

        log.debug("Solr query build: %s", solr_query)
        return solr_query

    def assemble_faceted(self, request: FacetedSearchRequest) -> SolrQuery:
        """Assemble a query and add the facet directives of ``request``."""
        solr_query = self.assemble(request)
        self._apply_facet_settings(request, solr_query)
        log.debug("Solr faceted query build: %s", solr_query)
        return solr_query

    def _set_highlight_params(self, request: SearchRequest, solr_query: SolrQuery) -> None:
        solr_query.set("hl", request.highlight)
        solr_query.set("hl.snippets", NUM_HL_SNIPPETS)
        solr_query.set("hl.fragsize", HL_FRAGMENT_SIZE)
        if request.highlight:
            for field in self.query_builder.highlighted_fields():
                solr_query.add_highlight_field(field)

    def _set_primary_sort_order(self, solr_query: SolrQuery) -> None:
        for field, order in self.primary_sort_order.items():
            solr_query.add_sort(field, order.value)

    def _set_spell_check_params(self, request: SearchRequest, solr_query: SolrQuery) -> None:
        if not request.spell_check:
            return
        count = request.spell_check_count if request.spell_check_count is not None else DEFAULT_SPELL_CHECK_COUNT
        solr_query.set("spellcheck", True)
        solr_query.set("spellcheck.q", (request.q or "").strip() or DEFAULT_QUERY)
        solr_query.set("spellcheck.count", count)
        solr_query.set("spellcheck.collate", True)
        solr_query.set("spellcheck.collateExtendedResults", True)

    def _apply_facet_settings(self, request: FacetedSearchRequest, solr_query: SolrQuery) -> None:
        if not request.facets:
            return

        solr_query.set("facet", True)
        solr_query.set(
            "facet.mincount",
            request.facet_min_count if request.facet_min_count is not None else DEFAULT_FACET_COUNT,
        )
        solr_query.set("facet.missing", DEFAULT_FACET_MISSING)
        solr_query.set("facet.sort", DEFAULT_FACET_SORT.value)
        if request.facet_limit is not None:
            solr_query.set("facet.limit", request.facet_limit)
        if request.facet_offset is not None:
            solr_query.set("facet.offset", request.facet_offset)

        for facet in request.facets:
            field = None
            if isinstance(facet, self.registry.parameter_enum):
                field = self.registry.facet_field_for(facet)
            if field is None:
                log.warning("%s is no valid facet. Ignore", facet)
                continue

            if request.multi_select_facets:
                solr_query.add_facet_field(tagged_facet_field(field))
            else:
                solr_query.add_facet_field(field)

            field_def = self.registry.facet_def(field)
            if field_def is not None:
                if field_def.missing != DEFAULT_FACET_MISSING:
                    solr_query.set_per_field(field, "facet.missing", field_def.missing)
                if field_def.sort is not DEFAULT_FACET_SORT:
                    solr_query.set_per_field(field, "facet.sort", field_def.sort.value)
                if field_def.method is not DEFAULT_FACET_METHOD:
                    solr_query.set_per_field(field, "facet.method", field_def.method.value)

            facet_page = request.facet_page(facet)
            if facet_page is not None:
                solr_query.set_per_field(field, "facet.offset", facet_page.offset)
                solr_query.set_per_field(field, "facet.limit", facet_page.limit)
