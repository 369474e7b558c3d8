"""CLI package for FacetSearch.

Inspect the Solr parameters composed for a request and translate saved
spell-check responses from the command line.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from FacetSearch.cli.runner import CommandRunner
from FacetSearch.cli.ui import cli


def main() -> None:
    """Run the FacetSearch CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
