"""compaction languages command - list summarized languages."""

import click

from compaction.core.progress import get_console, make_language_table
from compaction.summary.parsing import LANGUAGES


@click.command()
@click.option("--plain", is_flag=True, help="One extension per line on stdout")
def languages_command(plain: bool) -> None:
    """List the languages and file extensions that get summarized."""
    if plain:
        for spec in sorted(LANGUAGES.values(), key=lambda s: s.name):
            for ext in sorted(spec.extensions):
                click.echo(f"{ext}\t{spec.name}")
        return

    table: dict[str, list[str]] = {name: sorted(spec.extensions) for name, spec in LANGUAGES.items()}
    get_console().print(make_language_table(table))
