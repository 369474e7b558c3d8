"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to the
runner.
"""

from __future__ import annotations

from pathlib import Path

import click

from FacetSearch.cli.commands import BuildQueryCommand, SpellCheckCommand
from FacetSearch.cli.runner import CommandRunner
from FacetSearch.config import load_config


@click.group(help="FacetSearch: compile faceted search requests into Solr queries.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group; loads the config for the subcommands."""
    ctx.obj = CommandRunner(load_config(config_path))


@cli.command("build")
@click.option("--q", "q", default=None, help="Free-text query.")
@click.option("--param", "params", multiple=True, metavar="NAME=VALUE", help="Filter value; prefix VALUE with '-' to negate.")
@click.option("--facet", "facets", multiple=True, metavar="NAME", help="Facet to compute.")
@click.option("--multi-select", is_flag=True, help="Exclude each facet's own filter when counting it.")
@click.option("--highlight", is_flag=True, help="Request highlighting.")
@click.option("--spell-check", is_flag=True, help="Request spell-check suggestions.")
@click.option("--offset", type=int, default=None)
@click.option("--limit", type=int, default=None)
@click.option("--facet-min-count", type=int, default=None)
@click.option("--facet-limit", type=int, default=None)
@click.pass_context
def build_cmd(
    ctx: click.Context,
    q: str | None,
    params: tuple[str, ...],
    facets: tuple[str, ...],
    multi_select: bool,
    highlight: bool,
    spell_check: bool,
    offset: int | None,
    limit: int | None,
    facet_min_count: int | None,
    facet_limit: int | None,
) -> None:
    """Print the Solr parameters composed for a request as JSON."""
    runner: CommandRunner = ctx.obj

    def execute() -> dict[str, list[str]]:
        command = BuildQueryCommand(
            builder=runner.builder,
            q=q,
            params=params,
            facets=facets,
            multi_select=multi_select,
            highlight=highlight,
            spell_check=spell_check,
            offset=offset,
            limit=limit,
            facet_min_count=facet_min_count,
            facet_limit=facet_limit,
        )
        return command.execute()

    runner.run(ctx.command.name, execute)


@cli.command("spellcheck")
@click.argument("response_path", type=click.Path(path_type=Path, dir_okay=False, exists=True))
@click.pass_context
def spellcheck_cmd(ctx: click.Context, response_path: Path) -> None:
    """Translate the spell-check section of a Solr JSON response."""
    runner: CommandRunner = ctx.obj
    runner.run(ctx.command.name, SpellCheckCommand(response_path).execute)
