"""Graphviz DOT output for graphs."""

from __future__ import annotations

import hashlib
import io
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import TextIO

    from ._graph import Graph

HEADER = "digraph graph_output {node [shape = box];\n"
FOOTER = "}"


def hash_label(label: str) -> str:
    """Derive a numeric DOT identifier from a node label.

    The identifier is deterministic across runs. Distinct labels may collide,
    in which case the renderer merges the nodes.

    Example:
        >>> hash_label("a") == hash_label("a")
        True

    """
    digest = hashlib.blake2b(label.encode("utf-8"), digest_size=8).digest()
    return str(int.from_bytes(digest, "big"))


def _quote(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"')


def write_dot(graph: Graph[Any], out: TextIO) -> None:
    """Write ``graph`` to ``out`` in DOT format.

    One declaration per node in ascending node order, then one line per edge
    ordered by source and target.
    """
    ids: dict[Any, str] = {}

    out.write(HEADER)
    for node in graph:
        label = graph.labeler(node)
        ids[node] = hash_label(label)
        out.write(f'{ids[node]} [label = "{_quote(label)}" ];\n')

    for src, dst in graph.edges():
        out.write(f"{ids[src]} -> {ids[dst]} ;\n")
    out.write(FOOTER)


def to_dot(graph: Graph[Any]) -> str:
    """Render ``graph`` as a DOT string."""
    buffer = io.StringIO()
    write_dot(graph, buffer)
    return buffer.getvalue()
