"""Command runner for coordinating CLI execution.

Manages logging configuration, output and error handling for command
execution.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import click

from FacetSearch.config import AppConfig
from FacetSearch.solr import create_query_builder
from FacetSearch.solr.builder import SolrQueryBuilder
from FacetSearch.utils.log import configure_logging, log


class CommandRunner:
    """Runs CLI commands against one loaded configuration."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._builder: SolrQueryBuilder | None = None

    @property
    def builder(self) -> SolrQueryBuilder:
        """Query builder shared by the commands of this run."""
        if self._builder is None:
            self._builder = create_query_builder(self.config)
        return self._builder

    def run(self, action: str, execute: Callable[[], Any]) -> None:
        """Configure logging, execute a command and print its JSON result.

        Args:
            action: The CLI command name (e.g., 'build').
            execute: Callable producing a JSON-serializable result.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.log.level,
            action=action,
            log_to_file=self.config.log.to_file,
            log_dir=self.config.log.dir,
        )
        try:
            result = execute()
        except (OSError, TypeError, ValueError) as error:
            log.error("%s failed: %s", action, error)
            raise click.Abort() from error
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))
