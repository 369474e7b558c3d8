"""Result model schema configuration.

Describes the search parameter enumeration and the searchable fields of a
result model in YAML, as an alternative to declaring them in Python:

    schema:
      name: Occurrence
      parameters:
        COUNTRY: {type: enum, values: [US, CA, DE]}
        YEAR: int
        SCIENTIFIC_NAME: str
      fields:
        scientific_name:
          full_text: {partial_matching: right, partial_match_score: 0.5, highlight: true}
          parameter: SCIENTIFIC_NAME
        country:
          facet: {facet: COUNTRY, method: enum}

The section is turned into a ``SearchParameter`` enumeration and a dataclass
result model carrying ``search_field`` declarations.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from FacetSearch.config.common import (
    expect_bool,
    expect_enum,
    expect_identifier,
    expect_identifier_list,
    expect_mapping,
    expect_optional_str,
    expect_score,
    expect_str,
    get_section,
    get_value,
)
from FacetSearch.core.params import VALUE_TYPE_NAMES, SearchParameter, make_parameter_enum
from FacetSearch.metadata.fields import (
    FacetField,
    FacetMethod,
    FacetSort,
    FullTextSearchField,
    WildcardPadding,
    search_field,
)


@dataclass(frozen=True, slots=True)
class SchemaConfig:
    """Parsed schema: parameter enumeration and result model type."""

    name: str
    parameter_enum: type[SearchParameter]
    model: type


def load_schema(raw: Mapping[str, Any]) -> SchemaConfig:
    """Load the ``schema`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed schema configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing or values are invalid.
    """
    section = get_section(raw, "schema", required=True)
    name = expect_identifier(get_value(section, "name", "Result"), "schema.name")

    parameter_types = {
        expect_identifier(member, "schema.parameters"): _parse_parameter_type(
            value, member, f"schema.parameters.{member}"
        )
        for member, value in get_section(section, "parameters", required=True, parent="schema").items()
    }
    parameter_enum = make_parameter_enum(f"{name}SearchParameter", parameter_types)

    model_fields = [
        _parse_field(attribute, value, f"schema.fields.{attribute}")
        for attribute, value in get_section(section, "fields", required=True, parent="schema").items()
    ]
    model = dataclasses.make_dataclass(name, model_fields, frozen=True)
    return SchemaConfig(name=name, parameter_enum=parameter_enum, model=model)


def check_schema(config: SchemaConfig) -> None:
    """Validate schema domain constraints."""
    if not list(config.parameter_enum):
        raise ValueError("schema.parameters must include at least one parameter")
    if not dataclasses.fields(config.model):
        raise ValueError("schema.fields must include at least one field")


def _parse_parameter_type(value: Any, member: str, config_key: str) -> type:
    """Parse ``str``/``int``/... or ``{type: enum, values: [...]}``."""
    if isinstance(value, str):
        return _scalar_type(value, config_key)
    section = expect_mapping(value, config_key)
    type_name = expect_str(get_value(section, "type", "str"), f"{config_key}.type").strip().lower()
    if type_name != "enum":
        return _scalar_type(type_name, f"{config_key}.type")
    values = expect_identifier_list(section.get("values"), f"{config_key}.values")
    return Enum(member.title().replace("_", ""), [(item, item) for item in values])


def _scalar_type(name: str, config_key: str) -> type:
    value_type = VALUE_TYPE_NAMES.get(name.strip().lower())
    if value_type is None:
        raise ValueError(f"{config_key} must be one of {sorted(VALUE_TYPE_NAMES) + ['enum']}")
    return value_type


def _parse_field(attribute: str, value: Any, config_key: str) -> tuple[str, Any, Any]:
    expect_identifier(attribute, config_key)
    section = expect_mapping(value or {}, config_key)
    unknown = set(section) - {"native", "full_text", "facet", "parameter"}
    if unknown:
        raise ValueError(f"{config_key} has unknown keys: {sorted(unknown)}")

    full_text = None
    if section.get("full_text") is not None:
        full_text = _parse_full_text(section["full_text"], f"{config_key}.full_text")
    facet = None
    if section.get("facet") is not None:
        facet = _parse_facet(section["facet"], f"{config_key}.facet")

    declaration = search_field(
        native=expect_optional_str(section.get("native"), f"{config_key}.native"),
        full_text=full_text,
        facet=facet,
        parameter=expect_optional_str(section.get("parameter"), f"{config_key}.parameter"),
    )
    return attribute, Any, declaration


def _parse_full_text(value: Any, config_key: str) -> FullTextSearchField:
    section = expect_mapping(value, config_key)
    return FullTextSearchField(
        field=expect_optional_str(section.get("field"), f"{config_key}.field"),
        partial_matching=expect_enum(
            get_value(section, "partial_matching", "none"),
            WildcardPadding,
            f"{config_key}.partial_matching",
        ),
        partial_match_score=expect_score(
            get_value(section, "partial_match_score", 1.0),
            f"{config_key}.partial_match_score",
        ),
        exact_match_score=expect_score(
            get_value(section, "exact_match_score", 1.0),
            f"{config_key}.exact_match_score",
        ),
        highlight=expect_bool(get_value(section, "highlight", False), f"{config_key}.highlight"),
    )


def _parse_facet(value: Any, config_key: str) -> FacetField:
    section = expect_mapping(value, config_key)
    facet_name = expect_optional_str(section.get("facet"), f"{config_key}.facet")
    if facet_name is None:
        raise ValueError(f"Missing required config: {config_key}.facet")
    return FacetField(
        facet=facet_name,
        field=expect_optional_str(section.get("field"), f"{config_key}.field"),
        sort=expect_enum(get_value(section, "sort", "count"), FacetSort, f"{config_key}.sort"),
        missing=expect_bool(get_value(section, "missing", False), f"{config_key}.missing"),
        method=expect_enum(get_value(section, "method", "fc"), FacetMethod, f"{config_key}.method"),
    )
