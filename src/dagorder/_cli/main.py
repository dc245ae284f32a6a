import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dagorder._errors import UnregisteredVertexError
from dagorder._loader import (
    DependencyCycleError,
    DependencyFileError,
    load_dependency_file,
    resolve_order,
)

from .config import ConfigError, DagorderConfig, get_config
from .graph_query import get_dependency_tree, get_graph_summary, get_order_entries
from .graph_render import render_cycle, render_order_json, render_order_table, render_summary, render_tree

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
    """Order units so that every unit comes after its dependencies."""
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
        force=True,
    )


def _load_config() -> DagorderConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _resolve_file(file: Path | None, config: DagorderConfig) -> Path:
    if file is not None:
        return file
    if config.file is not None:
        logger.debug(f"Using dependency file from configuration: {config.file}")
        return config.file
    err_console.print(f"[red]Error: No dependency file given and none configured in {escape('[tool.dagorder].file')}[/red]")
    raise typer.Exit(code=1)


FileArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the dependency TOML file (defaults to the file setting in pyproject.toml)"),
]


@app.command()
def order(
    file: FileArgument = None,
    *,
    data: Annotated[
        bool,
        typer.Option("--data", help="Show each unit's data (always on when show-data is set in pyproject.toml)"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the order as JSON"),
    ] = False,
) -> None:
    """Print the units in install order, dependencies first."""
    config = _load_config()
    path = _resolve_file(file, config)
    show_data = data or config.show_data

    err_console.print(f"[cyan]Loading dependencies from:[/cyan] {path}")
    try:
        graph = load_dependency_file(path)
        result = resolve_order(graph)
    except DependencyCycleError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        render_cycle(e.cycle, err_console)
        raise typer.Exit(code=1) from e
    except DependencyFileError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    entries = get_order_entries(result)
    if as_json:
        render_order_json(entries, out_console, show_data=show_data)
    else:
        render_order_table(entries, out_console, show_data=show_data)


@app.command()
def check(file: FileArgument = None) -> None:
    """Check that a dependency file is valid and free of cycles."""
    config = _load_config()
    path = _resolve_file(file, config)

    err_console.print(f"[cyan]Loading dependencies from:[/cyan] {path}")
    try:
        graph = load_dependency_file(path)
        err_console.print("[cyan]Checking for cycles...[/cyan]")
        resolve_order(graph)
    except DependencyCycleError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        render_cycle(e.cycle, err_console)
        raise typer.Exit(code=1) from e
    except DependencyFileError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print()
    render_summary(get_graph_summary(graph), err_console, title=path.name)
    err_console.print()
    err_console.print("[green]✓ Dependency file is valid[/green]")


@app.command()
def deps(
    unit: Annotated[
        str,
        typer.Argument(help="Unit to show dependencies for"),
    ],
    file: FileArgument = None,
    *,
    reverse: Annotated[
        bool,
        typer.Option("--reverse", "-r", help="Show units that depend on UNIT instead"),
    ] = False,
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", min=1, help="Maximum tree depth"),
    ] = None,
) -> None:
    """Show the transitive dependencies of a unit as a tree."""
    config = _load_config()
    path = _resolve_file(file, config)

    try:
        graph = load_dependency_file(path)
    except DependencyFileError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    try:
        tree = get_dependency_tree(graph, unit, invert=reverse, max_depth=depth)
    except UnregisteredVertexError as e:
        err_console.print(f"[red]Error: Unit '{escape(unit)}' is not declared in {path}[/red]")
        raise typer.Exit(code=1) from e

    render_tree(tree, out_console)


def main() -> None:
    app()
