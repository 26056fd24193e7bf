"""Adjacency-list directed graph with structural transforms and SCC decomposition."""

from __future__ import annotations

import bisect
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, Self

from ._algorithms import DfsProps, SortKey, dfs, dfs_visit, init_dfs_map
from ._dot import to_dot, write_dot
from ._errors import DuplicateNodeError, IncompatibleNodeSetsError, UnknownNodeError

if TYPE_CHECKING:
    from typing import TextIO

logger = logging.getLogger(__name__)


class Comparable(Protocol):
    """Node values must be hashable and totally ordered."""

    def __lt__(self, other: Any, /) -> bool: ...

    def __hash__(self) -> int: ...


@dataclass(slots=True)
class Graph[T: Comparable]:
    """A directed graph storing both outgoing and incoming edges of every node.

    Every node maps to a strictly sorted list of successors and a strictly
    sorted list of predecessors, and the two always mirror each other. Keeping
    the lists sorted makes equality independent of insertion order.

    Nodes and edges are added in place; transforms such as :meth:`transpose`
    and :meth:`union` always return a new graph and leave the receiver as is.

    Attributes:
        labeler: Renders a node for DOT output. Not part of equality.

    Example:
        >>> graph = Graph()
        >>> for node in "abc":
        ...     graph.add_node(node)
        >>> graph.add_edge("a", "b")
        >>> graph.add_edge("b", "a")
        >>> graph.scc()
        [['c'], ['a', 'b']]

    """

    labeler: Callable[[T], str] = field(default=str, compare=False)
    _nodes: set[T] = field(default_factory=set, repr=False)
    _successors: dict[T, list[T]] = field(default_factory=dict, repr=False)
    _predecessors: dict[T, list[T]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[T],
        edges: Iterable[tuple[T, T]] = (),
        labeler: Callable[[T], str] = str,
    ) -> Self:
        """Build a graph by adding ``nodes`` and then ``edges`` one at a time.

        Raises:
            DuplicateNodeError: If ``nodes`` contains the same node twice.
            UnknownNodeError: If an edge references a node not in ``nodes``.

        """
        graph = cls(labeler=labeler)
        for node in nodes:
            graph.add_node(node)
        for src, dst in edges:
            graph.add_edge(src, dst)
        return graph

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def add_node(self, node: T) -> None:
        """Add an isolated node.

        Raises:
            DuplicateNodeError: If the node is already in the graph.

        """
        if node in self._nodes:
            raise DuplicateNodeError(node)
        self._nodes.add(node)
        self._successors[node] = []
        self._predecessors[node] = []

    def add_edge(self, from_node: T, to_node: T) -> None:
        """Add the directed edge ``from_node -> to_node``.

        Adding an edge that already exists is a no-op and only logs a warning.

        Raises:
            UnknownNodeError: If either endpoint is not in the graph.

        """
        for node in (from_node, to_node):
            if node not in self._nodes:
                raise UnknownNodeError(node)

        if not self._insert_edge(from_node, to_node):
            logger.warning(f"Edge {from_node!r} -> {to_node!r} already exists, ignoring add_edge")

    def _insert_edge(self, from_node: T, to_node: T) -> bool:
        succ = self._successors[from_node]
        index = bisect.bisect_left(succ, to_node)
        if index < len(succ) and succ[index] == to_node:
            return False
        succ.insert(index, to_node)
        bisect.insort(self._predecessors[to_node], from_node)
        return True

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph."""
        return frozenset(self._nodes)

    @property
    def succ_map(self) -> Mapping[T, list[T]]:
        """Read-only view of the successor lists."""
        return MappingProxyType(self._successors)

    @property
    def pred_map(self) -> Mapping[T, list[T]]:
        """Read-only view of the predecessor lists."""
        return MappingProxyType(self._predecessors)

    def successors(self, node: T) -> tuple[T, ...]:
        """Targets of the outgoing edges of ``node``, in ascending order."""
        try:
            return tuple(self._successors[node])
        except KeyError:
            raise UnknownNodeError(node) from None

    def predecessors(self, node: T) -> tuple[T, ...]:
        """Sources of the incoming edges of ``node``, in ascending order."""
        try:
            return tuple(self._predecessors[node])
        except KeyError:
            raise UnknownNodeError(node) from None

    def exists_edge(self, from_node: T, to_node: T) -> bool:
        """Check if the edge ``from_node -> to_node`` is in the graph."""
        succ = self._successors.get(from_node)
        if succ is None:
            raise UnknownNodeError(from_node)
        if to_node not in self._nodes:
            raise UnknownNodeError(to_node)
        index = bisect.bisect_left(succ, to_node)
        return index < len(succ) and succ[index] == to_node

    def edges(self) -> Iterator[tuple[T, T]]:
        """Iterate over all edges, ordered by source and then target."""
        for node in sorted(self._nodes):
            for neighbor in self._successors[node]:
                yield node, neighbor

    def equals(self, other: Graph[T]) -> bool:
        """Structural equality: same nodes and same edges. The labeler is ignored."""
        return self == other

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._nodes

    def __iter__(self) -> Iterator[T]:
        """Iterate over the nodes in ascending order."""
        return iter(sorted(self._nodes))

    def __repr__(self) -> str:
        return f"Graph(nodes={sorted(self._nodes)!r}, edges={list(self.edges())!r})"

    def __str__(self) -> str:
        return self.to_dot()

    # ------------------------------------------------------------------
    # Structural transforms
    # ------------------------------------------------------------------

    def clear_edges(self) -> Graph[T]:
        """Return a copy of this graph with the same nodes and no edges."""
        return Graph(
            labeler=self.labeler,
            _nodes=set(self._nodes),
            _successors={node: [] for node in self._nodes},
            _predecessors={node: [] for node in self._nodes},
        )

    def transpose(self) -> Graph[T]:
        """Return the graph with every edge ``u -> v`` replaced by ``v -> u``."""
        result = self.clear_edges()
        # Sources are taken in ascending order, so the appended lists stay sorted
        for node, neighbor in self.edges():
            result._successors[neighbor].append(node)
            result._predecessors[node].append(neighbor)
        return result

    def union(self, other: Graph[T]) -> Graph[T]:
        """Return a graph holding the edges of both operands.

        Raises:
            IncompatibleNodeSetsError: If the node sets differ.

        """
        if self._nodes != other._nodes:
            raise IncompatibleNodeSetsError(
                missing=frozenset(self._nodes - other._nodes),
                extra=frozenset(other._nodes - self._nodes),
            )

        result = self.clear_edges()
        for graph in (self, other):
            for src, dst in graph.edges():
                result._insert_edge(src, dst)
        return result

    def __add__(self, other: Graph[T]) -> Graph[T]:
        if not isinstance(other, Graph):
            return NotImplemented
        return self.union(other)

    # ------------------------------------------------------------------
    # Depth-first search
    # ------------------------------------------------------------------

    def dfs(self, key: SortKey[T] | None = None) -> dict[T, DfsProps[T]]:
        """Depth-first search over the whole graph.

        Args:
            key: Sort key deciding the order in which the outer loop picks
                tree roots. Natural node order when omitted.

        Returns:
            DFS properties (parent, discovery and finish times) of every node.

        """
        return dfs(self._successors, self._nodes, key=key)

    def dfs_visit(
        self,
        node: T,
        props: dict[T, DfsProps[T]] | None = None,
        time: int = 0,
    ) -> tuple[int, list[T]]:
        """Visit every node reachable from ``node``.

        Args:
            node: Start node.
            props: DFS properties to update in place. Fresh ones when omitted.
            time: Clock value before the visit.

        Returns:
            The clock after the visit and the visited nodes in pre-order.

        """
        if props is None:
            props = init_dfs_map(self._nodes)
        return dfs_visit(self._successors, node, props, time)

    def dfs_forest(self, key: SortKey[T] | None = None) -> Graph[T]:
        """Return the DFS forest: an edge from every node's DFS parent to the node."""
        result = self.clear_edges()
        for node, props in self.dfs(key).items():
            if props.parent is not None:
                result.add_edge(props.parent, node)
        return result

    # ------------------------------------------------------------------
    # Strongly connected components
    # ------------------------------------------------------------------

    def scc(self, key: SortKey[T] | None = None) -> list[list[T]]:
        """Decompose the graph into strongly connected components (Kosaraju).

        The second pass runs on the transpose, taking roots by decreasing
        finish time of the first pass. Each tree of the resulting forest is
        exactly one component.

        Args:
            key: Sort key for the outer loop of the first pass.

        Returns:
            One list per component, each in DFS pre-order of its tree.
            Components are ordered so that no edge leads from a later
            component to an earlier one.

        """
        finish = {node: props.finish_time for node, props in self.dfs(key).items()}

        transposed = self.transpose()
        forest = transposed.dfs_forest(key=lambda node: -finish[node])

        roots = sorted(
            (node for node in forest._nodes if not forest._predecessors[node]),
            key=lambda node: -finish[node],
        )
        props = init_dfs_map(forest._nodes)
        components = [forest.dfs_visit(root, props)[1] for root in roots]

        logger.debug(f"Found {len(components)} strongly connected component(s) in {len(self)} node(s)")
        return components

    def is_strongly_connected(self) -> bool:
        """Check if every node is reachable from every other node."""
        return len(self.scc()) == 1

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dot(self) -> str:
        """Render the graph in Graphviz DOT format."""
        return to_dot(self)

    def write_dot(self, out: TextIO) -> None:
        """Write the graph in Graphviz DOT format to ``out``."""
        write_dot(self, out)
