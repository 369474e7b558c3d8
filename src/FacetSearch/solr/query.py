"""Mutable Solr request parameters.

``SolrQuery`` holds ordered, multi-valued request parameters the same way a
Solr client does, with helpers for the parameters the builder sets. It is built
fresh per request and handed to whatever client executes it.
"""

from __future__ import annotations

from typing import Iterable

from FacetSearch.solr.constants import OR_OP


class SolrQuery:
    """Ordered multi-valued Solr request parameters."""

    __slots__ = ("_params",)

    def __init__(self, query: str | None = None) -> None:
        self._params: dict[str, list[str]] = {}
        if query is not None:
            self.set_query(query)

    def set(self, name: str, *values: object) -> SolrQuery:
        """Replace all values of ``name``; no values removes the parameter."""
        if not values:
            self._params.pop(name, None)
        else:
            self._params[name] = [_to_param(v) for v in values]
        return self

    def add(self, name: str, *values: object) -> SolrQuery:
        """Append values to ``name``."""
        self._params.setdefault(name, []).extend(_to_param(v) for v in values)
        return self

    def get(self, name: str) -> str | None:
        """Return the first value of ``name``."""
        values = self._params.get(name)
        return values[0] if values else None

    def get_all(self, name: str) -> list[str]:
        return list(self._params.get(name, ()))

    def remove(self, name: str) -> None:
        self._params.pop(name, None)

    def names(self) -> list[str]:
        return list(self._params)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def to_params(self) -> list[tuple[str, str]]:
        """Return ``(name, value)`` pairs in insertion order."""
        return [(name, value) for name, values in self._params.items() for value in values]

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._params.items()}

    def set_query(self, query: str) -> SolrQuery:
        return self.set("q", query)

    @property
    def query(self) -> str | None:
        return self.get("q")

    def set_paging(self, start: int, rows: int) -> SolrQuery:
        return self.set("start", start).set("rows", rows)

    def add_filter_query(self, *filter_queries: str) -> SolrQuery:
        return self.add("fq", *filter_queries)

    @property
    def filter_queries(self) -> list[str]:
        return self.get_all("fq")

    def add_facet_field(self, *fields: str) -> SolrQuery:
        self.set("facet", True)
        return self.add("facet.field", *fields)

    @property
    def facet_fields(self) -> list[str]:
        return self.get_all("facet.field")

    def add_highlight_field(self, field: str) -> SolrQuery:
        fields = [f for f in (self.get("hl.fl") or "").split(",") if f]
        if field not in fields:
            fields.append(field)
        return self.set("hl.fl", ",".join(fields))

    @property
    def highlight_fields(self) -> list[str]:
        return [f for f in (self.get("hl.fl") or "").split(",") if f]

    def add_sort(self, field: str, order: str) -> SolrQuery:
        clause = f"{field} {order}"
        current = self.get("sort")
        return self.set("sort", f"{current},{clause}" if current else clause)

    def set_request_handler(self, handler: str | None) -> SolrQuery:
        return self.set("qt", handler) if handler else self.set("qt")

    def set_per_field(self, field: str, name: str, value: object) -> SolrQuery:
        """Set a per-field override, e.g. ``f.country.facet.sort``."""
        return self.set(per_field_param_name(field, name), value)

    def __repr__(self) -> str:
        return f"SolrQuery({self.to_params()!r})"


def per_field_param_name(field: str, name: str) -> str:
    return f"f.{field}.{name}"


def _to_param(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def join_or(clauses: Iterable[str]) -> str:
    """Return the parenthesized OR-join of ``clauses``."""
    return "(" + OR_OP.join(clauses) + ")"
