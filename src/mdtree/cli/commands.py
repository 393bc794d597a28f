"""CLI command implementations"""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger

from mdtree.config import EXTENSIONS, Settings, load_config
from mdtree.core.models import images, plain_text
from mdtree.core.parse import DocumentModelError, parse_file
from mdtree.core.pipeline import document_model, run_extract


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _blocks(path: Path, settings: Settings) -> list:
    """Read one file and build its block tree, exiting on any failure."""
    try:
        options = settings.parsing_options()
        return document_model(parse_file(path).markdown, options)
    except (OSError, ValueError, DocumentModelError) as e:
        _fail(f"Failed to read {path}", e)


def configure_logging(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
    ):
    """Markdown to typed document model conversion."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def build_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to process")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="json or yaml")] = None,
    no_ext: Annotated[Optional[list[str]], typer.Option("--no-ext", help="Disable a Markdown extension")] = None,
    depth: Annotated[Optional[int], typer.Option("--max-depth", help="Deepest element nesting accepted")] = None,
    ):
    """Build the document model of every Markdown file under path."""
    settings = _settings(overrides={"output_dir": out, "output_format": fmt, "max_depth": depth})
    if no_ext:
        unknown = set(no_ext) - EXTENSIONS
        if unknown:
            _fail(f"Unknown extension(s): {', '.join(sorted(unknown))}")
        settings = settings.model_copy(update={"extensions": [e for e in settings.extensions if e not in no_ext]})

    output_dir = Path(settings.output_dir)
    try:
        results = run_extract(path, output_dir, settings.parsing_options(), settings.output_format)
    except (RuntimeError, ValueError) as e:
        _fail(str(e))
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Built {len(results)} document(s) to {output_dir}/")


def show_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to convert")],
    ):
    """Print the block tree of a Markdown file as JSON."""
    settings = _settings()
    blocks = _blocks(path, settings)
    typer.echo(json.dumps([b.model_dump(mode="json") for b in blocks], indent=2))


def text_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to flatten")],
    ):
    """Print the flattened text of a Markdown file, one line per leaf block."""
    settings = _settings()
    typer.echo(plain_text(_blocks(path, settings)))


def images_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to scan")],
    ):
    """List every image in a Markdown file: source, alt text, and link destination."""
    settings = _settings()
    found = images(_blocks(path, settings))
    if not found:
        typer.echo("No images found.")
        raise typer.Exit(1)
    for image in found:
        typer.echo(f"{image.source or ''}\t{image.alt}\t{image.destination or ''}")
