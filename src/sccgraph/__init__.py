"""Directed graphs with transforms, depth-first search and strongly connected components."""

__all__ = [
    "DfsColor",
    "DfsProps",
    "DuplicateNodeError",
    "Graph",
    "GraphError",
    "GraphFileError",
    "IncompatibleNodeSetsError",
    "UnknownNodeError",
    "dump_graph",
    "hash_label",
    "load_graph",
    "to_dot",
    "write_dot",
]

from ._algorithms import DfsColor, DfsProps
from ._dot import hash_label, to_dot, write_dot
from ._errors import (
    DuplicateNodeError,
    GraphError,
    GraphFileError,
    IncompatibleNodeSetsError,
    UnknownNodeError,
)
from ._graph import Graph
from ._io import dump_graph, load_graph
