"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from sccgraph import Graph


@dataclass(frozen=True, slots=True)
class GraphSummary:
    """Structural overview of a graph."""

    node_count: int
    edge_count: int
    roots: list[str]
    leaves: list[str]
    component_count: int
    largest_component: int

    @classmethod
    def of(cls, graph: Graph[str]) -> GraphSummary:
        components = graph.scc()
        return cls(
            node_count=len(graph),
            edge_count=sum(1 for _ in graph.edges()),
            roots=[graph.labeler(n) for n in graph if not graph.predecessors(n)],
            leaves=[graph.labeler(n) for n in graph if not graph.successors(n)],
            component_count=len(components),
            largest_component=max((len(c) for c in components), default=0),
        )


def render_component_table(graph: Graph[str], components: list[list[str]], console: Console) -> None:
    """Render strongly connected components as a Rich table.

    Args:
        graph: Graph the components belong to, used for labels.
        components: Components as returned by ``Graph.scc``.
        console: Rich Console to output to.

    """
    if not components:
        console.print("[dim]Graph has no nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Nodes")

    for index, component in enumerate(components, start=1):
        style = "bold" if len(component) > 1 else "dim"
        labels = ", ".join(escape(graph.labeler(node)) for node in component)
        table.add_row(str(index), str(len(component)), f"[{style}]{labels}[/{style}]")

    console.print(table)
    console.print(f"\n[dim]Total: {len(components)} components[/dim]")


def render_summary(summary: GraphSummary, console: Console) -> None:
    """Render a graph summary."""
    console.print(f"[cyan]Nodes:[/cyan]       {summary.node_count}")
    console.print(f"[cyan]Edges:[/cyan]       {summary.edge_count}")
    console.print(f"[cyan]Components:[/cyan]  {summary.component_count} (largest: {summary.largest_component})")
    console.print(f"[cyan]Roots:[/cyan]       {_format_names(summary.roots)}")
    console.print(f"[cyan]Leaves:[/cyan]      {_format_names(summary.leaves)}")


def _format_names(names: list[str]) -> str:
    if not names:
        return "[dim]None[/dim]"
    return ", ".join(escape(name) for name in names)
