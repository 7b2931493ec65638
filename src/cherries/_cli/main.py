import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cherries._document import ExprDocument, document_schema, export_document, load_document
from cherries._render import render_tree

from .config import CherriesConfig, ConfigError, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Cherries CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config_or_exit() -> CherriesConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_document_or_exit(path: Path) -> ExprDocument:
    """Load a document file, reporting problems on stderr."""
    if not path.exists():
        err_console.print(f"[red]Error: Document file not found: {path}[/red]")
        raise typer.Exit(code=1)

    try:
        return load_document(path)
    except ValueError as e:
        # Covers unknown suffixes, json.JSONDecodeError, tomllib.TOMLDecodeError and pydantic.ValidationError
        logger.debug("Failed to load %s", path, exc_info=True)
        reason = "Invalid document" if isinstance(e, ValidationError) else "Cannot read document"
        err_console.print(f"[red]Error: {reason} {path}[/red]")
        err_console.print(f"[dim]{escape(str(e))}[/dim]")
        raise typer.Exit(code=1) from e


@app.command()
def show(
    path: Annotated[
        Path,
        typer.Argument(help="Path to a document file (.json or .toml)"),
    ],
    *,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=1, help="Number of tree levels to draw (default: all)"),
    ] = None,
) -> None:
    """Draw a stored expression tree."""
    config = _load_config_or_exit()
    document = _load_document_or_exit(path)

    depth = max_depth if max_depth is not None else config.max_depth
    render_tree(document, out_console, max_depth=depth)


@app.command()
def convert(
    path: Annotated[
        Path,
        typer.Argument(help="Path to a document file (.json or .toml)"),
    ],
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to the converted file (.json or .toml)"),
    ],
    indent: Annotated[
        int | None,
        typer.Option("--indent", min=0, help="JSON indentation spaces (default: from config, else 2)"),
    ] = None,
) -> None:
    """Convert a document between JSON and TOML."""
    config = _load_config_or_exit()
    document = _load_document_or_exit(path)

    err_console.print(f"[cyan]Writing document to:[/cyan] {output}")
    output.parent.mkdir(parents=True, exist_ok=True)
    try:
        export_document(document, output, indent=indent if indent is not None else config.indent)
    except (ValueError, TypeError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print("[green]✓ Conversion complete[/green]")


@app.command()
def schema(
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output JSON schema file (default: stdout)"),
    ] = None,
    indent: Annotated[
        int,
        typer.Option("--indent", min=0, help="JSON indentation spaces"),
    ] = 2,
) -> None:
    """Generate the JSON schema of expression documents."""
    json_schema = document_schema()

    if output is None:
        out_console.print_json(json.dumps(json_schema), indent=indent)
        return

    err_console.print(f"[cyan]Writing schema to:[/cyan] {output}")
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w") as f:
        json.dump(json_schema, f, indent=indent)

    err_console.print("[green]✓ Schema generation complete[/green]")


def main() -> None:
    app()
