"""Exceptions raised by graph operations."""

from typing import Any


class GraphError(Exception):
    """Base class for all sccgraph errors."""


class DuplicateNodeError(GraphError, ValueError):
    """Raised when adding a node that is already part of the graph."""

    def __init__(self, node: Any) -> None:
        self.node = node
        super().__init__(f"Node {node!r} already exists in the graph")


class UnknownNodeError(GraphError, LookupError):
    """Raised when an operation references a node that is not in the graph."""

    def __init__(self, node: Any) -> None:
        self.node = node
        super().__init__(f"Node {node!r} does not exist in the graph")


class IncompatibleNodeSetsError(GraphError, ValueError):
    """Raised when combining graphs whose node sets differ."""

    def __init__(self, missing: frozenset[Any], extra: frozenset[Any]) -> None:
        self.missing = missing
        self.extra = extra
        super().__init__(
            "Graph union is only supported on graphs with identical node sets "
            f"(missing: {sorted(missing)!r}, extra: {sorted(extra)!r})",
        )


class GraphFileError(GraphError):
    """Raised when a graph description file cannot be loaded."""
