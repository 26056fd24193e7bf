"""Depth-first search primitives shared by the graph transforms."""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from ._errors import UnknownNodeError

logger = logging.getLogger(__name__)

type SortKey[T] = Callable[[T], Any]


class DfsColor(Enum):
    """Visitation state of a node during depth-first search."""

    WHITE = auto()
    """Not discovered yet."""
    GRAY = auto()
    """Discovered, still on the active path."""
    BLACK = auto()
    """Finished, all descendants processed."""


@dataclass(slots=True)
class DfsProps[T]:
    """Book-keeping for one node during depth-first search.

    Attributes:
        parent: Node from which this node was discovered, or None for a DFS root.
        discovery_time: Clock value when the node turned gray, -1 if never visited.
        finish_time: Clock value when the node turned black, -1 if never finished.
        color: Current visitation state.

    """

    parent: T | None = None
    discovery_time: int = -1
    finish_time: int = -1
    color: DfsColor = DfsColor.WHITE

    @property
    def is_root(self) -> bool:
        """Whether the node was reached without a parent."""
        return self.parent is None


def init_dfs_map[T](nodes: Iterable[T]) -> dict[T, DfsProps[T]]:
    """Create fresh (white, parentless) DFS properties for every node."""
    return {node: DfsProps() for node in nodes}


def dfs_visit[T](
    successors: Mapping[T, Sequence[T]],
    node: T,
    props: dict[T, DfsProps[T]],
    time: int = 0,
) -> tuple[int, list[T]]:
    """Visit every white node reachable from ``node``.

    The traversal uses an explicit stack of ``(node, successor iterator)``
    frames, so the recursion limit does not bound the depth of the graph.
    Discovery and finish times are taken from a single logical clock that
    starts at ``time``.

    Args:
        successors: Mapping from node to its sorted successors.
        node: Node to start from. It must be white in ``props``.
        props: DFS properties, updated in place.
        time: Clock value before the visit.

    Returns:
        The clock value after the visit and the visited nodes in pre-order.

    Raises:
        UnknownNodeError: If ``node`` has no entry in ``props``.
        ValueError: If ``node`` is not white in ``props``.

    """
    if node not in props:
        raise UnknownNodeError(node)
    if props[node].color is not DfsColor.WHITE:
        msg = f"DFS visit must start from an unvisited node, {node!r} is {props[node].color.name.lower()}"
        raise ValueError(msg)

    visited: list[T] = []

    def discover(current: T) -> Iterator[T]:
        nonlocal time
        time += 1
        props[current].discovery_time = time
        props[current].color = DfsColor.GRAY
        visited.append(current)
        return iter(successors[current])

    stack: list[tuple[T, Iterator[T]]] = [(node, discover(node))]
    while stack:
        current, neighbors = stack[-1]
        for neighbor in neighbors:
            if props[neighbor].color is DfsColor.WHITE:
                props[neighbor].parent = current
                stack.append((neighbor, discover(neighbor)))
                break
        else:
            stack.pop()
            time += 1
            props[current].finish_time = time
            props[current].color = DfsColor.BLACK

    return time, visited


def dfs[T](
    successors: Mapping[T, Sequence[T]],
    nodes: Iterable[T],
    key: SortKey[T] | None = None,
) -> dict[T, DfsProps[T]]:
    """Run a full depth-first search over ``nodes``.

    The outer loop starts a new tree from every node that is still white,
    taking nodes in the order given by ``key`` (natural order when omitted).

    Example:
        >>> props = dfs({"a": ["b"], "b": []}, ["a", "b"])
        >>> props["b"].parent, props["b"].discovery_time, props["a"].finish_time
        ('a', 2, 4)

    """
    # Ties under ``key`` fall back to natural order
    order = sorted(sorted(nodes), key=key)
    props = init_dfs_map(order)

    time = 0
    for node in order:
        if props[node].color is DfsColor.WHITE:
            time, visited = dfs_visit(successors, node, props, time)
            logger.debug(f"DFS tree rooted at {node!r} covers {len(visited)} node(s)")

    return props
