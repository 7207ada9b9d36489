"""CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

if TYPE_CHECKING:
    from todoboard.config import Config
    from todoboard.store import TodoStore

app = typer.Typer(
    name="todoboard",
    help="Task board - list, board and calendar views over CSV task files.",
    no_args_is_help=False,
)
console = Console()
err_console = Console(stderr=True)


def _get_config() -> Config:
    """Lazy import and load config."""
    from todoboard.config import Config

    return Config.load()


def _configure_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_store(path: Path) -> TodoStore:
    """Read a CSV file into a fresh store, exiting with an error on failure."""
    from todoboard.csvio import CsvImportError, build_import, parse_csv
    from todoboard.store import TodoStore

    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    try:
        rows = parse_csv(path.read_text())
    except CsvImportError as e:
        console.print(f"[red]Error:[/red] {path.name}: {e}")
        raise typer.Exit(1)
    except UnicodeDecodeError:
        console.print(f"[red]Error:[/red] {path.name}: not a UTF-8 text file")
        raise typer.Exit(1)

    store = TodoStore()
    store.import_tasks(build_import([], rows))
    return store


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Debug logging")] = False,
):
    """Start the interactive shell if no command given."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        shell(file=None)


@app.command()
def show(
    file: Annotated[Path, typer.Argument(help="CSV file to read")],
    view: Annotated[
        str | None, typer.Option("--view", "-V", help="list, board or calendar")
    ] = None,
    search: Annotated[str, typer.Option("--search", "-s", help="Text to search for")] = "",
    status: Annotated[
        list[str] | None, typer.Option("--status", help="complete / incomplete (repeatable)")
    ] = None,
    category: Annotated[
        list[str] | None, typer.Option("--category", "-c", help="Category (repeatable)")
    ] = None,
    priority: Annotated[
        list[str] | None, typer.Option("--priority", "-P", help="high/medium/low/none (repeatable)")
    ] = None,
    sort: Annotated[str | None, typer.Option("--sort", help="Sort preset")] = None,
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Page (list view)")] = 1,
    per_page: Annotated[int | None, typer.Option("--per-page", "-n", min=1)] = None,
    format_: Annotated[
        str | None, typer.Option("-f", "--format", help="Output format (overrides --view)")
    ] = None,
):
    """Show tasks from a CSV file."""
    from todoboard.formatters import get_formatter
    from todoboard.models import (
        StatusFilter,
        ViewMode,
        parse_priority,
        validate_category,
    )
    from todoboard.pipeline import paginate, parse_sort_preset

    cfg = _get_config()
    store = _load_store(file)

    try:
        store.set_search(search)
        if status:
            store.set_status_filter(StatusFilter(s.lower()) for s in status)
        if category:
            store.set_category_filter(validate_category(c) or "Uncategorized" for c in category)
        if priority:
            store.set_priority_filter(parse_priority(p) for p in priority)
        key, descending = parse_sort_preset(sort or cfg.default_sort)
        store.set_sort(key, descending)
        formatter = get_formatter(format_ or (ViewMode(view).value if view else cfg.default_format))
        if format_ is None and getattr(formatter, "NAME", None) == "list":
            formatter.date_format = cfg.date_format
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    visible = store.filtered()
    if getattr(formatter, "NAME", None) == "list":
        result = paginate(visible, page, per_page or cfg.items_per_page)
        output = formatter.format(list(result.items), page=result)
    else:
        output = formatter.format(visible)

    if isinstance(output, str) and getattr(formatter, "NAME", None) in ("csv", "jsonl"):
        console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(output)


@app.command()
def export(
    file: Annotated[Path, typer.Argument(help="CSV file to normalize")],
):
    """Re-export a CSV file in canonical form."""
    from todoboard.csvio import export_csv

    store = _load_store(file)
    if not len(store):
        console.print("[yellow]No tasks to export[/yellow]")
        raise typer.Exit(0)
    console.print(export_csv(store.tasks), markup=False, highlight=False, soft_wrap=True)


@app.command()
def sample():
    """Print a sample CSV template."""
    from todoboard.csvio import sample_csv

    console.print(sample_csv(), markup=False, highlight=False, soft_wrap=True)


@app.command()
def shell(
    file: Annotated[Path | None, typer.Argument(help="CSV file to start with")] = None,
):
    """Interactive session. Tasks live in memory until you export them."""
    from todoboard.models import ViewMode
    from todoboard.session import Session
    from todoboard.ui.shell import Shell

    cfg = _get_config()
    store = _load_store(file) if file else None
    session = Session.from_config(cfg, store=store)
    session.store.set_view(ViewMode(cfg.default_view))

    Shell(session, console).run()
    session.search.cancel()


@app.command()
def config(
    key: Annotated[str | None, typer.Argument(help="Setting to read or change")] = None,
    value: Annotated[str | None, typer.Argument(help="New value")] = None,
    reset: Annotated[bool, typer.Option("--reset", help="Restore the default")] = False,
):
    """Show settings, or read/change one: `config KEY [VALUE]`."""
    from rich.table import Table

    from todoboard.config import ConfigError

    cfg = _get_config()
    if key is not None:
        if not (reset or value is not None):
            if key not in cfg.DEFAULTS:
                console.print(f"[red]Error:[/red] Unknown setting: {key}")
                raise typer.Exit(1)
            console.print(str(getattr(cfg, key)), markup=False, highlight=False)
            return
        try:
            if reset:
                cfg.reset(key)
            else:
                cfg.set(key, value)
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] {key} = {getattr(cfg, key)}")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_column("Description", style="dim")
    for key, desc, value in cfg.get_settings():
        table.add_row(key, str(value), desc)
    console.print(table)
    console.print(f"[dim]{cfg.config_file}[/dim]")
