from __future__ import annotations

"""Public configuration API for FacetSearch."""

from FacetSearch.config.app import (
    AppConfig,
    check_cross_domain,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from FacetSearch.config.query import QueryConfig
from FacetSearch.config.log import LogConfig
from FacetSearch.config.schema import SchemaConfig

__all__ = [
    "LogConfig",
    "QueryConfig",
    "SchemaConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
    "check_cross_domain",
]
