"""CLI entry point for logsidian."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, NoReturn

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from logsidian.config import LogsidianConfig, configure_logging, load_config
from logsidian.config.loader import DEFAULT_CONFIG_TEMPLATE
from logsidian.converter import PageConverter, convert_directory
from logsidian.errors import ConversionError, MissingAssetDirectoryError
from logsidian.index import IdentifierIndex, IndexBuildReport, index_directory

app = typer.Typer(
    name="logsidian",
    help="Convert a Logseq graph into an Obsidian vault.",
)

config_app = typer.Typer(help="Manage logsidian configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: LogsidianConfig | None = None


def _get_config() -> LogsidianConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to logsidian.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging("debug" if verbose else _config.log_level, _config.log_format)


def _index_path(index: str | None) -> Path:
    return Path(index or _get_config().index.path)


def _fail(e: Exception) -> NoReturn:
    rprint(f"[red]Error:[/red] {escape(str(e))}")
    if isinstance(e, MissingAssetDirectoryError):
        rprint(f"[dim]Create it first:[/dim] mkdir -p {escape(str(e.path))}")
    raise typer.Exit(1)


def _display_index_report(report: IndexBuildReport, path: Path) -> None:
    table = Table(title="Identifier Index")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Pages", str(report.pages))
    table.add_row("Identifiers", str(report.identifiers))
    table.add_row("Duplicates", str(len(report.duplicates)))
    table.add_row("Written to", str(path))
    rprint(table)

    for dup in report.duplicates:
        pages = ", ".join(d.page for d in dup.discarded)
        rprint(
            f"  [yellow]warn:[/yellow] duplicate id {dup.id}: "
            f"kept {escape(dup.kept.page)}, ignored {escape(pages)}"
        )


def _load_index(path: Path) -> IdentifierIndex:
    if not path.is_file():
        rprint(
            f"[red]Error:[/red] identifier index not found: {path}\n"
            "Run [bold]logsidian index[/bold] over the source directory first."
        )
        raise typer.Exit(1)
    try:
        return IdentifierIndex.load(path)
    except ConversionError as e:
        _fail(e)


@app.command()
def index(
    source: str = typer.Argument(..., help="Directory of Logseq pages"),
    output: Annotated[
        str | None, typer.Option("--index", "-i", help="Where to write the index")
    ] = None,
) -> None:
    """Build the identifier index over a directory of pages."""
    cfg = _get_config()
    path = _index_path(output)
    rprint(f"[bold]Indexing[/bold] {source}...")

    try:
        built, report = index_directory(Path(source), cfg.index.ignore)
        built.save(path)
    except ConversionError as e:
        _fail(e)

    _display_index_report(report, path)


@app.command()
def convert(
    file: str = typer.Argument(..., help="Logseq page to convert"),
    vault: str = typer.Argument(..., help="Destination Obsidian vault"),
    index_file: Annotated[
        str | None, typer.Option("--index", "-i", help="Identifier index to resolve against")
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Preview without writing")] = False,
) -> None:
    """Convert one page into the vault."""
    cfg = _get_config()
    ids = _load_index(_index_path(index_file))
    converter = PageConverter(vault, ids, cfg)

    try:
        result = converter.convert(file, dry_run=dry_run)
    except (ConversionError, ValueError) as e:
        _fail(e)

    if dry_run:
        rprint("[yellow](dry run, nothing written)[/yellow]")
    rprint(f"[green]{escape(result.title)}[/green] -> {escape(result.destination)}")
    for copy in result.assets:
        rprint(f"  [dim]asset:[/dim] {copy.source} -> {copy.destination}")
    for block_id in result.unresolved:
        rprint(f"  [yellow]warn:[/yellow] unresolved block reference (({block_id}))")


@app.command(name="convert-all")
def convert_all(
    source: str = typer.Argument(..., help="Directory of Logseq pages"),
    vault: str = typer.Argument(..., help="Destination Obsidian vault"),
    index_file: Annotated[
        str | None, typer.Option("--index", "-i", help="Identifier index to resolve against")
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Preview without writing")] = False,
) -> None:
    """Convert every page of a directory into the vault."""
    cfg = _get_config()
    ids = _load_index(_index_path(index_file))

    try:
        report = convert_directory(source, vault, ids, cfg, dry_run=dry_run)
    except ConversionError as e:
        _fail(e)

    table = Table(title="Vault Conversion" + (" (dry run)" if dry_run else ""))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Converted", str(report.converted))
    table.add_row("Unresolved references", str(report.unresolved))
    table.add_row("Assets", str(report.assets))
    table.add_row("Errors", str(len(report.errors)))
    table.add_row("Duration", f"{report.duration:.2f}s")
    rprint(table)

    for err in report.errors:
        rprint(f"  [red]error:[/red] {escape(err.file)}: {escape(err.error)}")
    if report.errors:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default logsidian.yaml in current directory."""
    target = Path("logsidian.yaml")
    if target.exists() and not force:
        rprint("[yellow]logsidian.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
