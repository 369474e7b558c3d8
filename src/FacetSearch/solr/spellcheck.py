"""Spell-check response translation.

Parses the ``spellcheck`` section of a Solr JSON response and translates it
into the engine-agnostic ``SpellCheckResponse``.

Collations are preferred over per-term suggestions: Solr has re-run the query
for every collation, so its hit count is real, while per-term suggestions give
no guarantee that the corrected query matches anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FacetSearch.core.models import SpellCheckResponse, Suggestion
from FacetSearch.utils.log import log


@dataclass(frozen=True, slots=True)
class Correction:
    original: str
    correction: str


@dataclass(frozen=True, slots=True)
class Collation:
    """A corrected form of the whole query, with the hits it returned."""

    query: str
    hits: int
    corrections: tuple[Correction, ...] = ()


@dataclass(frozen=True, slots=True)
class TermSuggestion:
    token: str
    num_found: int
    alternatives: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EngineSpellCheck:
    """Spell-check section of a Solr response."""

    correctly_spelled: bool
    suggestions: tuple[TermSuggestion, ...] = ()
    collations: tuple[Collation, ...] = ()


def translate(engine_response: EngineSpellCheck) -> SpellCheckResponse:
    """Translate a Solr spell-check section into a ``SpellCheckResponse``."""
    suggestions: dict[str, Suggestion] = {}
    if engine_response.collations:
        for collation in engine_response.collations:
            token = " ".join(c.original for c in collation.corrections)
            correction = " ".join(c.correction for c in collation.corrections)
            suggestions.setdefault(token, Suggestion(num_found=collation.hits, alternatives=(correction,)))
    else:
        for term in engine_response.suggestions:
            suggestions.setdefault(
                term.token,
                Suggestion(num_found=term.num_found, alternatives=term.alternatives),
            )
    return SpellCheckResponse(
        correctly_spelled=engine_response.correctly_spelled,
        suggestions=suggestions,
    )


def translate_response(raw: Mapping[str, Any]) -> SpellCheckResponse:
    """Parse and translate a Solr JSON response or its ``spellcheck`` section."""
    return translate(parse_spellcheck(raw))


def parse_spellcheck(raw: Mapping[str, Any]) -> EngineSpellCheck:
    """Parse the ``spellcheck`` section of a Solr JSON response.

    Accepts the full response or the section itself. Named lists may use any
    ``json.nl`` style (flat, map or arrarr). Collations without extended
    results carry no corrections and are ignored.

    Raises:
        TypeError: If the section is not an object.
        ValueError: If a named list is malformed.
    """
    section = raw.get("spellcheck", raw)
    if not isinstance(section, Mapping):
        raise TypeError("spellcheck must be an object")

    terms: list[TermSuggestion] = []
    collations: list[Collation] = []
    correctly_spelled = section.get("correctlySpelled")

    for name, value in named_items(section.get("suggestions")):
        # Pre-5.0 responses nest these in the suggestion list.
        if name == "correctlySpelled":
            correctly_spelled = bool(value)
        elif name == "collation":
            _append_collation(collations, value)
        elif isinstance(value, Mapping):
            terms.append(_parse_term(name, value))

    for name, value in named_items(section.get("collations")):
        if name == "collation":
            _append_collation(collations, value)

    if correctly_spelled is None:
        correctly_spelled = not terms and not collations
    return EngineSpellCheck(
        correctly_spelled=bool(correctly_spelled),
        suggestions=tuple(terms),
        collations=tuple(collations),
    )


def named_items(value: Any) -> list[tuple[str, Any]]:
    """Return ``(name, value)`` pairs of a Solr named list."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    if not isinstance(value, list):
        raise ValueError(f"Expected a named list, got {type(value).__name__}")
    if value and all(isinstance(item, list) and len(item) == 2 and isinstance(item[0], str) for item in value):
        return [(item[0], item[1]) for item in value]
    if len(value) % 2:
        raise ValueError("Named list must contain name/value pairs")
    return [(str(value[i]), value[i + 1]) for i in range(0, len(value), 2)]


def _parse_term(token: str, value: Mapping[str, Any]) -> TermSuggestion:
    alternatives: list[str] = []
    for item in value.get("suggestion") or ():
        if isinstance(item, Mapping):
            word = item.get("word")
            if word is not None:
                alternatives.append(str(word))
        else:
            alternatives.append(str(item))
    return TermSuggestion(
        token=token,
        num_found=_as_int(value.get("numFound"), default=len(alternatives)),
        alternatives=tuple(alternatives),
    )


def _append_collation(collations: list[Collation], value: Any) -> None:
    if not isinstance(value, Mapping):
        log.debug("Ignoring collation without extended results: %s", value)
        return
    corrections = tuple(
        Correction(original=str(original), correction=str(correction))
        for original, correction in named_items(value.get("misspellingsAndCorrections"))
    )
    if not corrections:
        log.debug("Ignoring collation without corrections: %s", value)
        return
    collations.append(
        Collation(
            query=str(value.get("collationQuery", "")),
            hits=_as_int(value.get("hits"), default=0),
            corrections=corrections,
        )
    )


def _as_int(value: Any, *, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
