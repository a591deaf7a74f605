"""compaction summarize command - print the summary of one file."""

from pathlib import Path

import click

from compaction.config.constants import DEFAULT_MAX_DOC_LINES
from compaction.core.progress import spinner
from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import ExtractionFailure


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--max-doc-lines",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_DOC_LINES,
    show_default=True,
    help="Doc comment lines kept per declaration",
)
def summarize_command(file: Path, max_doc_lines: int) -> None:
    """Print the summary of FILE exactly as peek_file would cache it.

    Exits with status 1 when the file type is unsupported or does not parse.
    """
    try:
        with file.open(encoding="utf-8", newline="") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{file} is not valid UTF-8 text") from e

    with spinner(f"Summarizing {file.name}"):
        outcome = ExtractorRegistry(max_doc_lines=max_doc_lines).extract(file, text)
    if isinstance(outcome, ExtractionFailure):
        click.echo(f"Could not generate summary: {outcome.error}", err=True)
        raise SystemExit(1)
    if outcome.summary.is_empty():
        click.echo(f"No public declarations found in {file.name}", err=True)
    click.echo(outcome.text)
