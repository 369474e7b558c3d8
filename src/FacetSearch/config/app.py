from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from FacetSearch.config.query import QueryConfig, check_query, load_query
from FacetSearch.config.log import LogConfig, load_log
from FacetSearch.config.schema import SchemaConfig, check_schema, load_schema
from FacetSearch.core.errors import ConfigurationError
from FacetSearch.metadata.registry import FieldMetadataRegistry


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    log: LogConfig
    query: QueryConfig
    schema: SchemaConfig
    registry: FieldMetadataRegistry


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If values are missing or invalid.
        ConfigurationError: If the schema declarations are inconsistent.
    """
    log_config = load_log(raw)
    query = load_query(raw)
    schema = load_schema(raw)

    check_query(query)
    check_schema(schema)

    config = AppConfig(
        log=log_config,
        query=query,
        schema=schema,
        registry=FieldMetadataRegistry.build(schema.model, schema.parameter_enum),
    )
    check_cross_domain(config)
    return config


def load_config(path: Path) -> AppConfig:
    """Load YAML config file without default merge."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(
    config_path: Path, default_path: Path = Path("config/default.yml")
) -> AppConfig:
    """Load config by merging defaults and optional override."""
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path == default_path:
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    merged = merge_config_dicts(base, override)
    return parse_config_dict(merged)


def check_cross_domain(config: AppConfig) -> None:
    """Validate cross-domain constraints."""
    exact = config.query.exact_match_field
    if exact is not None and exact not in {f.field for f in config.registry.full_text_fields}:
        raise ConfigurationError(f"query.exact_match_field is not a full-text field: {exact}")


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
