"""Tests for spell-check response translation."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FacetSearch.solr.spellcheck import (
    Collation,
    Correction,
    EngineSpellCheck,
    TermSuggestion,
    named_items,
    parse_spellcheck,
    translate,
    translate_response,
)


def _collation(query, hits, *pairs):
    return {
        "collationQuery": query,
        "hits": hits,
        "misspellingsAndCorrections": [item for pair in pairs for item in pair],
    }


class TestTranslate(unittest.TestCase):
    def test_collations_are_preferred(self) -> None:
        engine = EngineSpellCheck(
            correctly_spelled=False,
            suggestions=(
                TermSuggestion("pum", 3, ("puma", "pam", "plum")),
                TermSuggestion("conclor", 1, ("concolor",)),
            ),
            collations=(
                Collation(
                    "puma concolor",
                    42,
                    (Correction("pum", "puma"), Correction("conclor", "concolor")),
                ),
            ),
        )
        response = translate(engine)
        self.assertFalse(response.correctly_spelled)
        self.assertEqual(list(response.suggestions), ["pum conclor"])
        suggestion = response.suggestions["pum conclor"]
        self.assertEqual(suggestion.num_found, 42)
        self.assertEqual(suggestion.alternatives, ("puma concolor",))

    def test_per_term_suggestions_without_collations(self) -> None:
        engine = EngineSpellCheck(
            correctly_spelled=False,
            suggestions=(TermSuggestion("pum", 3, ("puma", "pam", "plum")),),
        )
        suggestion = translate(engine).suggestions["pum"]
        self.assertEqual(suggestion.num_found, 3)
        self.assertEqual(suggestion.alternatives, ("puma", "pam", "plum"))

    def test_first_entry_wins_for_repeated_key(self) -> None:
        engine = EngineSpellCheck(
            correctly_spelled=False,
            collations=(
                Collation("puma", 42, (Correction("pum", "puma"),)),
                Collation("plum", 7, (Correction("pum", "plum"),)),
            ),
        )
        suggestion = translate(engine).suggestions["pum"]
        self.assertEqual(suggestion.num_found, 42)
        self.assertEqual(suggestion.alternatives, ("puma",))

    def test_correct_query(self) -> None:
        response = translate(EngineSpellCheck(correctly_spelled=True))
        self.assertTrue(response.correctly_spelled)
        self.assertEqual(dict(response.suggestions), {})

    def test_response_is_read_only(self) -> None:
        response = translate(EngineSpellCheck(correctly_spelled=True))
        with self.assertRaises(TypeError):
            response.suggestions["x"] = None  # type: ignore[index]


class TestParseSpellcheck(unittest.TestCase):
    def test_flat_named_lists(self) -> None:
        raw = {
            "responseHeader": {"status": 0},
            "spellcheck": {
                "suggestions": [
                    "pum",
                    {"numFound": 2, "startOffset": 0, "endOffset": 3, "suggestion": ["puma", "plum"]},
                    "conclor",
                    {"numFound": 1, "startOffset": 4, "endOffset": 11, "suggestion": ["concolor"]},
                ],
                "correctlySpelled": False,
                "collations": [
                    "collation",
                    _collation("puma concolor", 42, ("pum", "puma"), ("conclor", "concolor")),
                ],
            },
        }
        response = translate_response(raw)
        self.assertFalse(response.correctly_spelled)
        self.assertEqual(response.suggestions["pum conclor"].num_found, 42)
        self.assertEqual(response.suggestions["pum conclor"].alternatives, ("puma concolor",))

    def test_map_form_with_extended_suggestions(self) -> None:
        raw = {
            "suggestions": {
                "pum": {
                    "numFound": 2,
                    "suggestion": [{"word": "puma", "freq": 120}, {"word": "plum", "freq": 3}],
                },
            },
            "correctlySpelled": False,
        }
        engine = parse_spellcheck(raw)
        self.assertEqual(engine.suggestions, (TermSuggestion("pum", 2, ("puma", "plum")),))
        self.assertEqual(engine.collations, ())

    def test_legacy_nested_form(self) -> None:
        raw = {
            "spellcheck": {
                "suggestions": [
                    "pum",
                    {"numFound": 1, "suggestion": ["puma"]},
                    "correctlySpelled",
                    False,
                    "collation",
                    _collation("puma", 12, ("pum", "puma")),
                ]
            }
        }
        engine = parse_spellcheck(raw)
        self.assertFalse(engine.correctly_spelled)
        self.assertEqual(len(engine.collations), 1)
        self.assertEqual(engine.collations[0].hits, 12)
        self.assertEqual(engine.collations[0].corrections, (Correction("pum", "puma"),))

    def test_plain_collation_strings_are_ignored(self) -> None:
        raw = {
            "suggestions": ["pum", {"numFound": 1, "suggestion": ["puma"]}],
            "correctlySpelled": False,
            "collations": ["collation", "puma"],
        }
        response = translate_response(raw)
        self.assertEqual(list(response.suggestions), ["pum"])

    def test_missing_correctly_spelled_is_derived(self) -> None:
        self.assertTrue(parse_spellcheck({"suggestions": []}).correctly_spelled)
        self.assertFalse(
            parse_spellcheck({"suggestions": ["pum", {"suggestion": ["puma"]}]}).correctly_spelled
        )

    def test_num_found_defaults_to_alternative_count(self) -> None:
        engine = parse_spellcheck({"suggestions": ["pum", {"suggestion": ["puma", "plum"]}]})
        self.assertEqual(engine.suggestions[0].num_found, 2)

    def test_section_must_be_object(self) -> None:
        with self.assertRaises(TypeError):
            parse_spellcheck({"spellcheck": ["suggestions"]})


class TestNamedItems(unittest.TestCase):
    def test_forms(self) -> None:
        expected = [("a", 1), ("b", 2)]
        self.assertEqual(named_items(["a", 1, "b", 2]), expected)
        self.assertEqual(named_items({"a": 1, "b": 2}), expected)
        self.assertEqual(named_items([["a", 1], ["b", 2]]), expected)
        self.assertEqual(named_items(None), [])

    def test_odd_length_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            named_items(["a", 1, "b"])


if __name__ == "__main__":
    unittest.main()
