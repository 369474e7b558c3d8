"""Command implementations for the FacetSearch CLI.

Encapsulates the work of each command, separated from CLI parameter handling
and output formatting.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from FacetSearch.core.models import FacetedSearchRequest, SpellCheckResponse
from FacetSearch.solr.builder import SolrQueryBuilder
from FacetSearch.solr.spellcheck import translate_response
from FacetSearch.utils.log import log


@dataclass(slots=True)
class BuildQueryCommand:
    """Compile one request into Solr parameters."""

    builder: SolrQueryBuilder
    q: str | None = None
    params: Sequence[str] = ()
    facets: Sequence[str] = ()
    multi_select: bool = False
    highlight: bool = False
    spell_check: bool = False
    offset: int | None = None
    limit: int | None = None
    facet_min_count: int | None = None
    facet_limit: int | None = None
    request: FacetedSearchRequest = field(init=False)

    def __post_init__(self) -> None:
        self.request = self._create_request()

    def execute(self) -> dict[str, list[str]]:
        """Return the composed Solr parameters keyed by name."""
        solr_query = self.builder.build(self.request)
        log.info(
            "Built query: q=%s filters=%d facets=%d",
            solr_query.query,
            len(solr_query.filter_queries),
            len(solr_query.facet_fields),
        )
        return solr_query.to_dict()

    def _create_request(self) -> FacetedSearchRequest:
        parameter_enum = self.builder.registry.parameter_enum
        request = FacetedSearchRequest(
            q=self.q,
            offset=self.offset,
            limit=self.limit,
            highlight=self.highlight,
            spell_check=self.spell_check,
            facet_min_count=self.facet_min_count,
            facet_limit=self.facet_limit,
            multi_select_facets=self.multi_select,
        )
        for item in self.params:
            name, value = split_assignment(item)
            parameter = parameter_enum.lookup(name)
            if parameter is None:
                log.warning("Unknown search parameter %s", name)
                continue
            request.add_parameter(parameter, value)
        for name in self.facets:
            facet = parameter_enum.lookup(name)
            if facet is None:
                log.warning("%s is no valid facet. Ignore", name)
                continue
            request.add_facets(facet)
        return request


@dataclass(slots=True)
class SpellCheckCommand:
    """Translate the spell-check section of a saved Solr JSON response."""

    response_path: Path

    def execute(self) -> dict[str, Any]:
        raw = json.loads(self.response_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"{self.response_path} must contain a JSON object")
        response = translate_response(raw)
        log.info("Spell check: correctly_spelled=%s suggestions=%d", response.correctly_spelled, len(response.suggestions))
        return spellcheck_to_dict(response)


def split_assignment(item: str) -> tuple[str, str]:
    """Split ``NAME=VALUE``.

    Raises:
        ValueError: If ``item`` has no ``=`` or an empty name.
    """
    name, sep, value = item.partition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected NAME=VALUE, got: {item}")
    return name.strip(), value


def spellcheck_to_dict(response: SpellCheckResponse) -> dict[str, Any]:
    return {
        "correctlySpelled": response.correctly_spelled,
        "suggestions": {
            token: {"numFound": s.num_found, "alternatives": list(s.alternatives)}
            for token, s in response.suggestions.items()
        },
    }
