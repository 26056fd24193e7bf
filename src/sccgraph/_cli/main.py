import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sccgraph._errors import GraphError
from sccgraph._graph import Graph
from sccgraph._io import load_graph

from .config import ConfigError, get_config
from .render import GraphSummary, render_component_table, render_summary

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
    """Sccgraph CLI."""
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


def _resolve_input(path: Path | None) -> Path:
    """Use the given path, falling back to [tool.sccgraph].input."""
    if path is not None:
        return path

    try:
        config = get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if config.input is None:
        err_console.print("[red]Error:[/red] No graph file given and no \\[tool.sccgraph].input configured")
        raise typer.Exit(code=1)
    logger.debug(f"Using input from configuration: {config.input}")
    return config.input


def _load(path: Path | None) -> Graph[str]:
    input_path = _resolve_input(path)
    if not input_path.is_file():
        err_console.print(f"[red]Error:[/red] Graph file not found: {escape(str(input_path))}")
        raise typer.Exit(code=1)

    err_console.print(f"[cyan]Loading graph from:[/cyan] {escape(str(input_path))}")
    try:
        return load_graph(input_path)
    except GraphError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


GraphArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to a TOML graph file (default: configured input)"),
]


@app.command()
def scc(path: GraphArgument = None) -> None:
    """List the strongly connected components of a graph."""
    graph = _load(path)
    components = graph.scc()
    render_component_table(graph, components, out_console)


@app.command()
def dot(
    path: GraphArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write DOT to this file (default: configured output or stdout)"),
    ] = None,
    transpose: Annotated[
        bool,
        typer.Option("--transpose", help="Emit the transposed graph"),
    ] = False,
    forest: Annotated[
        bool,
        typer.Option("--forest", help="Emit the depth-first search forest"),
    ] = False,
) -> None:
    """Emit a graph in Graphviz DOT format."""
    graph = _load(path)
    if transpose:
        graph = graph.transpose()
    if forest:
        graph = graph.dfs_forest()

    if output is None and path is None:
        output = get_config().output

    if output is None:
        # Bypass rich so markup-like text in labels is written verbatim
        typer.echo(graph.to_dot())
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        graph.write_dot(f)
        f.write("\n")
    err_console.print(f"[green]✓ Wrote DOT to[/green] {escape(str(output))}")


@app.command()
def info(path: GraphArgument = None) -> None:
    """Show a structural summary of a graph."""
    graph = _load(path)
    render_summary(GraphSummary.of(graph), out_console)


def main() -> None:
    app()
