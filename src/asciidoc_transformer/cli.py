"""Click CLI for asciidoc-transformer — render and inspect AsciiDoc files."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from asciidoc_transformer.config.hierarchy import load_config_hierarchy
from asciidoc_transformer.errors.exceptions import AsciidocTransformerError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_node(path: Path) -> Any:
    from asciidoc_transformer.types import DocumentNode, FileInfo, NodeInternal

    resolved = path.resolve()
    return DocumentNode(
        content=path.read_text(encoding="utf-8"),
        internal=NodeInternal(origin=str(resolved), timestamp=resolved.stat().st_mtime),
        file_info=FileInfo(path=str(resolved)),
        stem=path.stem,
    )


def _make_transformer(config: dict[str, Any]) -> Any:
    from asciidoc_transformer.cache.manager import MemoCacheManager
    from asciidoc_transformer.transformer import AsciidocTransformer

    cache = MemoCacheManager(
        max_entries=config.get("cache_max_entries", 1000),
        enabled=not config.get("cache_disabled", False),
    )
    return AsciidocTransformer(options=config.get("options") or {}, cache=cache)


def _run(config: dict[str, Any], path: Path, work: Any) -> Any:
    """Build a transformer for ``path`` and run ``work(transformer, node)``."""
    try:
        transformer = _make_transformer(config)
        node = _load_node(path)
        return asyncio.run(work(transformer, node))
    except (AsciidocTransformerError, OSError, UnicodeDecodeError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="asciidoc-transformer")
def cli() -> None:
    """asciidoc-transformer — memoized AsciiDoc rendering and inspection."""


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Output file path.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable the memo cache.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def render(input_path: str, output: str | None, no_cache: bool, verbose: int) -> None:
    """Render an AsciiDoc file to HTML."""
    config = load_config_hierarchy(cache_disabled=no_cache or None)
    _setup_logging(verbose, config.get("log_level", "WARNING"))

    async def _work(transformer: Any, node: Any) -> str:
        return await transformer.to_rendered_output(node)

    html = _run(config, Path(input_path), _work)

    if output:
        Path(output).write_text(html, encoding="utf-8")
        console.print(f"[green]Written to {output}[/green]")
    else:
        click.echo(html)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--depth", type=int, default=None, help="Only show headings at this level.")
@click.option("--keep-tags", is_flag=True, default=False, help="Keep inline markup in titles.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def headings(input_path: str, depth: int | None, keep_tags: bool, verbose: int) -> None:
    """Show the heading outline of an AsciiDoc file."""
    config = load_config_hierarchy()
    _setup_logging(verbose, config.get("log_level", "WARNING"))

    async def _work(transformer: Any, node: Any) -> list:
        return await transformer.to_headings(node, depth=depth, strip_tags=not keep_tags)

    outline = _run(config, Path(input_path), _work)

    table = Table(title="Headings", show_header=True)
    table.add_column("Depth", style="cyan")
    table.add_column("Title")
    table.add_column("Anchor")

    for heading in outline:
        table.add_row(str(heading.depth), heading.value, heading.anchor or "-")

    console.print(table)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--speed", type=int, default=None, help="Reading speed in words per minute.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def info(input_path: str, speed: int | None, verbose: int) -> None:
    """Show metadata and reading time of an AsciiDoc file."""
    config = load_config_hierarchy(words_per_minute=speed)
    _setup_logging(verbose, config.get("log_level", "WARNING"))
    words_per_minute = config["words_per_minute"]
    if words_per_minute < 1:
        error_console.print(f"[red]Error:[/red] speed must be positive, got {words_per_minute}")
        sys.exit(1)

    async def _work(transformer: Any, node: Any) -> tuple:
        parsed = transformer.parse(node.source)
        minutes = await transformer.to_reading_time(node, words_per_minute)
        return parsed, minutes

    parsed, minutes = _run(config, Path(input_path), _work)

    table = Table(title="Document Info", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Title", parsed.title or "-")
    if parsed.subtitle:
        table.add_row("Subtitle", parsed.subtitle)
    authors = ", ".join(a.author for a in parsed.authorlist if a.author)
    table.add_row("Authors", authors or "-")
    if parsed.revnumber is not None:
        table.add_row("Revision", f"{parsed.revnumber:g}")
    if parsed.revdate is not None:
        table.add_row("Revision date", parsed.revdate.isoformat())
    table.add_row("Excerpt", parsed.excerpt or "-")
    table.add_row("Time to read", f"{minutes} min ({words_per_minute} wpm)")

    console.print(table)


@cli.command("mime-types")
def mime_types() -> None:
    """List the mime types handled by the transformer."""
    from asciidoc_transformer.transformer import AsciidocTransformer

    for mime_type in AsciidocTransformer.mime_types():
        click.echo(mime_type)


def main() -> None:
    """Entry point for the CLI."""
    cli()
