"""Tests for Solr query assembly."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from FacetSearch.core.errors import ValueCoercionError
from FacetSearch.core.models import FacetedSearchRequest, Page, SearchRequest, SortOrder
from FacetSearch.solr.builder import SolrQueryBuilder
from search_models import Occurrence, P


def _builder() -> SolrQueryBuilder:
    return SolrQueryBuilder.create(Occurrence, P, exact_match_field="scientific_name")


class TestAssemble(unittest.TestCase):
    def setUp(self) -> None:
        self.builder = _builder()

    def test_phrase_query_without_filters(self) -> None:
        query = self.builder.assemble(SearchRequest(q="puma concolor"))
        self.assertEqual(
            query.query,
            '(scientific_name:"puma concolor"^10 OR vernacular_name:"puma concolor"^0.2)',
        )
        self.assertEqual(query.filter_queries, [])

    def test_defaults(self) -> None:
        query = self.builder.assemble(SearchRequest())
        self.assertEqual(query.query, "*:*")
        self.assertEqual(query.get("q.alt"), "*:*")
        self.assertEqual(query.get("start"), "0")
        self.assertEqual(query.get("rows"), "20")
        self.assertEqual(query.get("hl"), "false")
        self.assertEqual(query.get("hl.snippets"), "10")
        self.assertEqual(query.get("hl.fragsize"), "100")
        self.assertNotIn("hl.fl", query)
        self.assertNotIn("sort", query)
        self.assertNotIn("qt", query)
        self.assertNotIn("facet", query)
        self.assertNotIn("spellcheck", query)

    def test_paging(self) -> None:
        query = self.builder.assemble(SearchRequest(offset=40, limit=10))
        self.assertEqual(query.get("start"), "40")
        self.assertEqual(query.get("rows"), "10")

    def test_filters(self) -> None:
        request = SearchRequest()
        request.add_parameter(P.COUNTRY, "US", "-CA")
        request.add_parameter(P.YEAR, "1990,2000")
        query = self.builder.assemble(request)
        self.assertEqual(
            query.filter_queries,
            ["(country:US OR NOT country:CA)", "(year:[1990 TO 2000])"],
        )

    def test_highlight_fields_only_when_requested(self) -> None:
        query = self.builder.assemble(SearchRequest(q="puma", highlight=True))
        self.assertEqual(query.get("hl"), "true")
        self.assertEqual(query.highlight_fields, ["scientific_name", "vernacular_name"])

    def test_sort_and_request_handler(self) -> None:
        self.builder.with_primary_sort_order({"score": SortOrder.DESC, "key": "asc"})
        self.builder.with_request_handler("/distributed")
        query = self.builder.assemble(SearchRequest())
        self.assertEqual(query.get("sort"), "score desc,key asc")
        self.assertEqual(query.get("qt"), "/distributed")

    def test_spell_check(self) -> None:
        query = self.builder.assemble(SearchRequest(q="pum conclor", spell_check=True, spell_check_count=2))
        self.assertEqual(query.get("spellcheck"), "true")
        self.assertEqual(query.get("spellcheck.q"), "pum conclor")
        self.assertEqual(query.get("spellcheck.count"), "2")
        self.assertEqual(query.get("spellcheck.collate"), "true")

    def test_malformed_filter_value_fails_request(self) -> None:
        request = SearchRequest()
        request.add_parameter(P.HAS_COORDINATE, "perhaps")
        with self.assertRaises(ValueCoercionError):
            self.builder.assemble(request)

    def test_to_params_preserves_multi_values(self) -> None:
        request = SearchRequest()
        request.add_parameter(P.COUNTRY, "US")
        request.add_parameter(P.YEAR, "2000")
        params = self.builder.assemble(request).to_params()
        self.assertEqual([v for k, v in params if k == "fq"], ["(country:US)", "(year:2000)"])


class TestAssembleFaceted(unittest.TestCase):
    def setUp(self) -> None:
        self.builder = _builder()

    def test_no_facets_requested(self) -> None:
        query = self.builder.assemble_faceted(FacetedSearchRequest(q="puma"))
        self.assertNotIn("facet", query)
        self.assertEqual(query.facet_fields, [])

    def test_global_facet_settings(self) -> None:
        request = FacetedSearchRequest(facet_limit=5, facet_offset=10)
        request.add_facets(P.COUNTRY)
        query = self.builder.assemble_faceted(request)
        self.assertEqual(query.get("facet"), "true")
        self.assertEqual(query.get("facet.mincount"), "1")
        self.assertEqual(query.get("facet.missing"), "true")
        self.assertEqual(query.get("facet.sort"), "count")
        self.assertEqual(query.get("facet.limit"), "5")
        self.assertEqual(query.get("facet.offset"), "10")

    def test_facet_min_count_override(self) -> None:
        request = FacetedSearchRequest(facets=[P.COUNTRY], facet_min_count=0)
        self.assertEqual(self.builder.assemble_faceted(request).get("facet.mincount"), "0")

    def test_per_field_overrides(self) -> None:
        request = FacetedSearchRequest(facets=[P.COUNTRY, P.BASIS_OF_RECORD, P.YEAR])
        query = self.builder.assemble_faceted(request)
        self.assertEqual(query.facet_fields, ["country", "basis_of_record", "year"])
        self.assertEqual(query.get("f.country.facet.missing"), "false")
        self.assertNotIn("f.country.facet.sort", query)
        self.assertNotIn("f.country.facet.method", query)
        self.assertNotIn("f.basis_of_record.facet.missing", query)
        self.assertEqual(query.get("f.basis_of_record.facet.method"), "enum")
        self.assertEqual(query.get("f.year.facet.sort"), "index")

    def test_facet_page(self) -> None:
        request = FacetedSearchRequest(facets=[P.COUNTRY], facet_pages={P.COUNTRY: Page(offset=10, limit=5)})
        query = self.builder.assemble_faceted(request)
        self.assertEqual(query.get("f.country.facet.offset"), "10")
        self.assertEqual(query.get("f.country.facet.limit"), "5")

    def test_unknown_facet_is_skipped(self) -> None:
        request = FacetedSearchRequest(facets=[P.RECORDED_BY, P.COUNTRY])
        with self.assertLogs("FacetSearch", level="WARNING"):
            query = self.builder.assemble_faceted(request)
        self.assertEqual(query.facet_fields, ["country"])

    def test_multi_select_tags_filters_and_facets(self) -> None:
        request = FacetedSearchRequest(facets=[P.COUNTRY, P.YEAR], multi_select_facets=True)
        request.add_parameter(P.COUNTRY, "US", "-CA")
        query = self.builder.build(request)
        self.assertEqual(query.filter_queries, ["{!tag=ffq_country}(country:US OR NOT country:CA)"])
        self.assertEqual(query.facet_fields, ["{!ex=ffq_country}country", "{!ex=ffq_year}year"])

    def test_no_tags_without_multi_select(self) -> None:
        request = FacetedSearchRequest(facets=[P.COUNTRY])
        request.add_parameter(P.COUNTRY, "US")
        query = self.builder.build(request)
        self.assertEqual(query.filter_queries, ["(country:US)"])
        self.assertEqual(query.facet_fields, ["country"])

    def test_build_dispatches_on_request_type(self) -> None:
        plain = self.builder.build(SearchRequest(q="puma"))
        faceted = self.builder.build(FacetedSearchRequest(q="puma", facets=[P.COUNTRY]))
        self.assertNotIn("facet", plain)
        self.assertEqual(faceted.facet_fields, ["country"])


class TestDuplicate(unittest.TestCase):
    def test_duplicate_copies_per_request_state(self) -> None:
        original = _builder().with_primary_sort_order({"score": SortOrder.DESC})
        copy = original.duplicate()
        copy.with_primary_sort_order({"year": SortOrder.ASC}).with_request_handler("/shards")
        copy.primary_sort_order["key"] = SortOrder.ASC

        self.assertEqual(original.assemble(SearchRequest()).get("sort"), "score desc")
        self.assertIsNone(original.assemble(SearchRequest()).get("qt"))
        self.assertEqual(copy.assemble(SearchRequest()).get("sort"), "year asc,key asc")
        self.assertEqual(copy.assemble(SearchRequest()).get("qt"), "/shards")

    def test_duplicate_shares_registry_and_templates(self) -> None:
        original = _builder().with_request_handler("/select")
        copy = original.duplicate()
        self.assertIs(copy.registry, original.registry)
        self.assertIs(copy.query_builder, original.query_builder)
        self.assertEqual(copy.request_handler, "/select")
        self.assertEqual(copy.assemble(SearchRequest(q="puma")).query, original.assemble(SearchRequest(q="puma")).query)


if __name__ == "__main__":
    unittest.main()
