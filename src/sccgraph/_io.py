from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ._errors import GraphError, GraphFileError
from ._graph import Graph

logger = logging.getLogger(__name__)


class GraphFile(BaseModel):
    """Schema of a TOML graph description file.

    Example:
        nodes = ["A", "B", "C"]
        edges = [["A", "B"], ["B", "C"]]

        [labels]
        A = "Start"

    """

    model_config = ConfigDict(extra="forbid")

    nodes: list[str] = Field(default_factory=list)
    edges: list[Annotated[tuple[str, str], Field(description="(from, to) pair")]] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_labels(self) -> GraphFile:
        unknown = sorted(set(self.labels) - set(self.nodes))
        if unknown:
            msg = f"Labels given for unknown nodes: {unknown}"
            raise ValueError(msg)
        return self

    def to_graph(self) -> Graph[str]:
        """Build the graph, adding nodes and edges in file order."""
        labels = dict(self.labels)
        return Graph.from_edges(self.nodes, self.edges, labeler=lambda node: labels.get(node, node))

    @classmethod
    def from_graph(cls, graph: Graph[str]) -> GraphFile:
        labels = {node: graph.labeler(node) for node in graph if graph.labeler(node) != node}
        return cls(nodes=list(graph), edges=list(graph.edges()), labels=labels)


def load_graph(path: Path) -> Graph[str]:
    """Load a graph from a TOML description file.

    Args:
        path: Path to the TOML file.

    Returns:
        The graph described by the file.

    Raises:
        GraphFileError: If the file is not valid TOML, does not match the
            schema, or describes an invalid graph.

    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise GraphFileError(msg) from e

    try:
        graph_file = GraphFile.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid graph description in {path}: {e}"
        raise GraphFileError(msg) from e

    try:
        graph = graph_file.to_graph()
    except GraphError as e:
        msg = f"Invalid graph in {path}: {e}"
        raise GraphFileError(msg) from e

    logger.debug(f"Loaded graph with {len(graph)} nodes from {path}")
    return graph


def dump_graph(graph: Graph[str], path: Path) -> None:
    """Write a graph to a TOML description file.

    Labels are only written for nodes whose label differs from the node itself.
    """
    graph_file = GraphFile.from_graph(graph)
    # TOML has no tuple type
    data: dict[str, object] = {
        "nodes": graph_file.nodes,
        "edges": [list(edge) for edge in graph_file.edges],
    }
    if graph_file.labels:
        data["labels"] = graph_file.labels

    with path.open("wb") as f:
        tomli_w.dump(data, f)
    logger.debug(f"Exported graph to {path}")
