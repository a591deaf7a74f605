"""compaction serve command - run the stdio MCP server."""

from pathlib import Path
from typing import Any

import click

from compaction.config import load_config
from compaction.core.errors import ConfigError
from compaction.core.progress import pluralize, status


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--max-tracked-files", type=click.IntRange(min=1), help="Cached summaries kept before eviction")
@click.option("--max-doc-lines", type=click.IntRange(min=1), help="Doc comment lines kept per declaration")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def serve_command(
    ctx: click.Context,
    root: Path,
    max_tracked_files: int | None,
    max_doc_lines: int | None,
    verbose: bool,
) -> None:
    """Serve the file tools over stdio.

    ROOT is the project root used for relative paths (default: current directory).
    """
    from compaction.mcp.server import run_server

    project_root = root.resolve()
    context: dict[str, Any] = {"project_root": str(project_root)}
    if max_tracked_files is not None:
        context["max_tracked_files"] = max_tracked_files
    if max_doc_lines is not None:
        context["max_doc_lines"] = max_doc_lines

    overrides: dict[str, Any] = {"context": context}
    if verbose or (ctx.obj or {}).get("verbose"):
        overrides["logging"] = {"level": "DEBUG"}

    try:
        config = load_config(project_root, **overrides)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    tracked = pluralize(config.context.max_tracked_files, "summary", "summaries")
    status(f"Serving {project_root} (up to {tracked} cached)", style="success")
    run_server(project_root, config)
