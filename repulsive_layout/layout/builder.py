"""Graph construction from node and edge records."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Tuple

from .adjacency import AdjacencyIndex
from .model import Edge, Graph, Node
from .utils import coerce_float, coerce_index

logger = logging.getLogger(__name__)


def _node_from_record(idx: int, record: Any) -> Node:
    if isinstance(record, Node):
        x, y, fixed = record.x, record.y, record.fixed
    elif isinstance(record, Mapping):
        pos = record.get("pos")
        source = pos if isinstance(pos, Mapping) else record
        x, y = source.get("x"), source.get("y")
        fixed = record.get("fixed", False)
    elif isinstance(record, (list, tuple)) and len(record) in (2, 3):
        x, y = record[0], record[1]
        fixed = record[2] if len(record) == 3 else False
    else:
        raise ValueError(f"node {idx}: unsupported record {record!r}")

    fx, fy = coerce_float(x), coerce_float(y)
    if fx is None or fy is None:
        raise ValueError(f"node {idx}: coordinates must be numbers, got x={x!r} y={y!r}")
    if not (math.isfinite(fx) and math.isfinite(fy)):
        raise ValueError(f"node {idx}: coordinates must be finite, got x={fx!r} y={fy!r}")
    if not isinstance(fixed, bool):
        raise ValueError(f"node {idx}: fixed flag must be boolean, got {fixed!r}")
    return Node(fx, fy, fixed)


def _edge_from_record(idx: int, record: Any) -> Edge:
    if isinstance(record, Edge):
        return record
    if isinstance(record, Mapping):
        if "nodeA" in record or "nodeB" in record:
            a, b = record.get("nodeA"), record.get("nodeB")
        else:
            a, b = record.get("a"), record.get("b")
    elif isinstance(record, (list, tuple)) and len(record) == 2:
        a, b = record
    else:
        raise ValueError(f"edge {idx}: unsupported record {record!r}")

    ia, ib = coerce_index(a), coerce_index(b)
    if ia is None or ib is None:
        raise ValueError(f"edge {idx}: endpoints must be integers, got {a!r}, {b!r}")
    return Edge(ia, ib)


def build_graph(nodes: Iterable[Any], edges: Iterable[Any]) -> Tuple[Graph, AdjacencyIndex]:
    """Build a graph and its adjacency index from node and edge records.

    Raises :class:`OutOfRangeError` when an edge names a node that does not
    exist and :class:`ValueError` for malformed records.
    """

    node_list: List[Node] = [_node_from_record(i, rec) for i, rec in enumerate(nodes)]
    edge_list: List[Edge] = [_edge_from_record(i, rec) for i, rec in enumerate(edges)]
    graph = Graph(node_list, edge_list)
    if not any(node.fixed for node in node_list):
        logger.warning("Graph has no fixed node; the layout will drift while it relaxes")
    logger.info("Built graph with %d node(s) and %d edge(s)", graph.node_count, graph.edge_count)
    return graph, graph.adjacency


def build_graph_from_document(document: Mapping[str, Any]) -> Tuple[Graph, AdjacencyIndex]:
    """Build a graph from a ``{"nodes": [...], "edges": [...]}`` document."""

    if not isinstance(document, Mapping):
        raise ValueError("graph document must be a mapping")
    nodes = document.get("nodes")
    edges = document.get("edges", [])
    if not isinstance(nodes, list):
        raise ValueError("graph document requires a 'nodes' list")
    if not isinstance(edges, list):
        raise ValueError("graph document 'edges' must be a list")
    return build_graph(nodes, edges)


__all__ = ["build_graph", "build_graph_from_document"]
