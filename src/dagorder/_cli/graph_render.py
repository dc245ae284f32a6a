"""Rich rendering utilities for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from .graph_query import GraphSummary, OrderEntry, TreeNode


def render_order_table(entries: list[OrderEntry], console: Console, *, show_data: bool = False) -> None:
    """Render the install order as a Rich table.

    Args:
        entries: Units in install order.
        console: Rich Console to output to.
        show_data: Add a column with each unit's payload.

    """
    if not entries:
        console.print("[dim]No units declared[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Unit", style="bold")
    table.add_column("Depends on")
    if show_data:
        table.add_column("Data", style="dim")

    for entry in entries:
        deps = ", ".join(entry.depends_on) if entry.depends_on else "[dim]-[/dim]"
        row = [str(entry.position), escape(entry.name), escape(deps) if entry.depends_on else deps]
        if show_data:
            row.append(escape(json.dumps(entry.data, default=str)) if entry.data else "")
        table.add_row(*row)

    console.print(table)


def render_order_json(entries: list[OrderEntry], console: Console, *, show_data: bool = False) -> None:
    """Print the install order as a JSON array, without Rich markup."""
    payload = [
        {"name": entry.name, "depends_on": list(entry.depends_on)}
        | ({"data": entry.data} if show_data else {})
        for entry in entries
    ]
    console.print_json(json.dumps(payload, default=str))


def render_summary(summary: GraphSummary, console: Console, *, title: str) -> None:
    """Render unit and edge counts in a panel."""
    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column()
    table.add_row("Units", str(summary.unit_count))
    table.add_row("Dependencies", str(summary.edge_count))
    table.add_row("Without dependencies", escape(", ".join(summary.roots)) or "[dim]-[/dim]")
    table.add_row("Not depended on", escape(", ".join(summary.leaves)) or "[dim]-[/dim]")

    console.print(Panel(table, title=f"[bold]{escape(title)}[/bold]", border_style="cyan"))


def render_cycle(units: tuple[str, ...], console: Console) -> None:
    """Render the units forming a dependency cycle."""
    path = " [red]->[/red] ".join(f"[bold]{escape(unit)}[/bold]" for unit in units)
    console.print(Panel(path, title="[bold red]Dependency cycle[/bold red]", border_style="red"))


def render_tree(tree_node: TreeNode, console: Console) -> None:
    """Render a dependency tree using Rich Tree.

    Args:
        tree_node: TreeNode root to render.
        console: Rich Console to output to.

    """
    rich_tree = Tree(f"[bold]{escape(tree_node.name)}[/bold]")
    _add_tree_children(rich_tree, tree_node.children)
    console.print(rich_tree)


def _add_tree_children(parent: Tree, children: list[TreeNode]) -> None:
    for child in children:
        child_tree = parent.add(escape(child.name))
        _add_tree_children(child_tree, child.children)
