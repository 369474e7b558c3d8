"""Solr query syntax and request defaults."""

from __future__ import annotations

from typing import Final

from FacetSearch.metadata.fields import FacetMethod, FacetSort

# Free-text query placeholder substituted into query templates.
QUERY_PLACEHOLDER: Final = "$q"

DEFAULT_QUERY: Final = "*:*"
MATCH_ALL: Final = "*"
ALT_QUERY_PARAM: Final = "q.alt"

BLANK: Final = " "
SCORE_OP: Final = "^"
NOT_OP: Final = "NOT "
OR_OP: Final = " OR "
NEGATION_MARKER: Final = "-"
RANGE_FORMAT: Final = "[{} TO {}]"
RANGE_SEPARATOR: Final = ","

FACET_FILTER_TAG: Final = "ffq_"

NUM_HL_SNIPPETS: Final = 10
HL_FRAGMENT_SIZE: Final = 100

DEFAULT_OFFSET: Final = 0
DEFAULT_LIMIT: Final = 20

DEFAULT_FACET_COUNT: Final = 1
DEFAULT_FACET_MISSING: Final = True
DEFAULT_FACET_SORT: Final = FacetSort.COUNT
DEFAULT_FACET_METHOD: Final = FacetMethod.FIELD_CACHE

DEFAULT_SPELL_CHECK_COUNT: Final = 4
