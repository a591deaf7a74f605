"""Compaction CLI - compaction command."""

import click

from compaction.cli.languages import languages_command
from compaction.cli.serve import serve_command
from compaction.cli.summarize import summarize_command
from compaction.config.constants import SERVER_VERSION
from compaction.core.logging import configure_logging


@click.group()
@click.version_option(version=SERVER_VERSION, prog_name="compaction")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Compaction - one file in full, summaries for the rest."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(summarize_command, name="summarize")
cli.add_command(languages_command, name="languages")


if __name__ == "__main__":
    cli()
