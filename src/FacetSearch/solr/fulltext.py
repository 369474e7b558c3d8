"""Free-text query compiler.

Compiles the raw ``q`` string of a request into a boosted boolean Solr
expression across every full-text field of a result model.

Two templates are derived once from the field declarations:

- single-term template, used when the query has no whitespace
- phrase template, used when it does

Both are parenthesized OR-joins of per-field clauses holding the ``$q``
placeholder, e.g. ``(scientific_name:$q^10 OR scientific_name:$q*^0.5)``.
Building a query is a literal placeholder substitution.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol

from FacetSearch.core.errors import ConfigurationError
from FacetSearch.metadata.fields import FullTextSearchField, WildcardPadding
from FacetSearch.metadata.registry import FieldMetadataRegistry
from FacetSearch.solr.constants import DEFAULT_QUERY, MATCH_ALL, QUERY_PLACEHOLDER, SCORE_OP
from FacetSearch.solr.query import join_or
from FacetSearch.utils.log import log

_RE_WHITESPACE = re.compile(r"\s")
_RE_SPECIAL = re.compile(r'([\\+\-!():^\[\]"{}~*?|&;/])')


class FullTextQueryBuilder(Protocol):
    """Compiles free-text queries for one result model."""

    def build(self, q: str | None) -> str:
        """Return the Solr expression for the raw query ``q``."""
        raise NotImplementedError

    def highlighted_fields(self) -> list[str]:
        """Return the fields to highlight, in declaration order."""
        raise NotImplementedError


class TemplateQueryBuilder:
    """``FullTextQueryBuilder`` backed by construction-time query templates."""

    def __init__(
        self,
        fields: Iterable[FullTextSearchField],
        *,
        exact_match_field: str | None = None,
    ) -> None:
        """Derive the query templates.

        Args:
            fields: Full-text field declarations, with native names resolved.
            exact_match_field: Native field whose exact clause is added to both
                templates; its partial clause is left out of the phrase
                template.

        Raises:
            ConfigurationError: If a field has no native name, or
                ``exact_match_field`` is not a full-text field.
        """
        self._fields: tuple[FullTextSearchField, ...] = tuple(fields)
        self._exact_match_field = exact_match_field
        self._highlighted: tuple[str, ...] = ()
        self._query_template = QUERY_PLACEHOLDER
        self._phrase_query_template = QUERY_PLACEHOLDER
        self._init_templates()
        log.info(
            "Query patterns generated for simple / phrase searches: %s / %s",
            self._query_template,
            self._phrase_query_template,
        )

    @classmethod
    def from_registry(
        cls,
        registry: FieldMetadataRegistry,
        *,
        exact_match_field: str | None = None,
    ) -> TemplateQueryBuilder:
        return cls(registry.full_text_fields, exact_match_field=exact_match_field)

    @property
    def query_template(self) -> str:
        """Template for single-term queries."""
        return self._query_template

    @property
    def phrase_query_template(self) -> str:
        """Template for queries containing whitespace."""
        return self._phrase_query_template

    def build(self, q: str | None) -> str:
        parsed = parse_query_value(q)
        if parsed == MATCH_ALL:
            return DEFAULT_QUERY
        generated = self.search_pattern(parsed).replace(QUERY_PLACEHOLDER, parsed)
        log.debug("Solr query generated for fulltext search: %s", generated)
        return generated

    def search_pattern(self, parsed: str) -> str:
        """Return the template used for an already parsed query value."""
        if _RE_WHITESPACE.search(parsed):
            return self._phrase_query_template
        return self._query_template

    def highlighted_fields(self) -> list[str]:
        return list(self._highlighted)

    def _init_templates(self) -> None:
        single: list[str] = []
        phrase: list[str] = []
        highlighted: list[str] = []

        for field in self._fields:
            if not field.field:
                raise ConfigurationError("Full-text field declaration without a native field name")
            if field.partial_matching is WildcardPadding.NONE:
                single.append(_clause(field.field, QUERY_PLACEHOLDER, field.exact_match_score))
            else:
                single.append(
                    _clause(field.field, field.partial_matching.pad(QUERY_PLACEHOLDER), field.partial_match_score)
                )
                if field.field != self._exact_match_field:
                    phrase.append(_clause(field.field, QUERY_PLACEHOLDER, field.partial_match_score))
            if field.highlight and field.field not in highlighted:
                highlighted.append(field.field)

        if self._exact_match_field is not None:
            exact = next((f for f in self._fields if f.field == self._exact_match_field), None)
            if exact is None:
                raise ConfigurationError(f"Exact match field is not a full-text field: {self._exact_match_field}")
            exact_clause = _clause(exact.field, QUERY_PLACEHOLDER, exact.exact_match_score)
            if exact_clause not in single:
                single.insert(0, exact_clause)
            phrase.insert(0, exact_clause)

        if single:
            self._query_template = join_or(single)
        if phrase:
            self._phrase_query_template = join_or(phrase)
        self._highlighted = tuple(highlighted)


def parse_query_value(q: str | None) -> str:
    """Normalize a raw free-text query.

    Empty input becomes the match-everything sentinel ``*``. Input containing
    whitespace is quoted as a phrase unless it already is exactly one quoted
    phrase; single terms have query syntax characters escaped.
    """
    value = (q or "").strip()
    if not value or value == MATCH_ALL:
        return MATCH_ALL
    if _RE_WHITESPACE.search(value):
        if _is_single_phrase(value):
            return value
        return quote(value)
    return escape_query_chars(value)


def _is_single_phrase(value: str) -> bool:
    if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
        return False
    inner = value[1:-1]
    return '"' not in inner and "\\" not in inner


def escape_query_chars(value: str) -> str:
    return _RE_SPECIAL.sub(r"\\\1", value)


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_score(score: float) -> str:
    return f"{score:g}"


def _clause(field: str, pattern: str, score: float) -> str:
    return f"{field}:{pattern}{SCORE_OP}{format_score(score)}"
