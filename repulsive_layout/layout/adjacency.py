"""Topology-derived lookup tables built once per graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .. import vector2
from .model import EdgeIndex, Graph, NodeIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjacencyIndex:
    """Read-only incidence and disjoint-edge tables for one topology.

    ``incident_edges[n]`` lists the edges touching node ``n`` in edge order.
    ``disjoint_edges[e]`` lists, ascending, the edges sharing no endpoint
    with edge ``e``. No force term reads ``disjoint_edges`` yet; it is kept
    for a future non-adjacent edge repulsion term.
    ``initial_edge_lengths[e]`` is the length of edge ``e`` when the index
    was built.
    """

    incident_edges: Tuple[Tuple[EdgeIndex, ...], ...]
    disjoint_edges: Tuple[Tuple[EdgeIndex, ...], ...]
    initial_edge_lengths: Tuple[float, ...]

    def incident(self, node: NodeIndex) -> Tuple[EdgeIndex, ...]:
        return self.incident_edges[node]

    def disjoint(self, edge: EdgeIndex) -> Tuple[EdgeIndex, ...]:
        return self.disjoint_edges[edge]


def _incidence(graph: Graph) -> List[List[EdgeIndex]]:
    table: List[List[EdgeIndex]] = [[] for _ in range(graph.node_count)]
    for idx, edge in enumerate(graph.edges):
        table[edge.node_a].append(idx)
        table[edge.node_b].append(idx)
    return table


def _disjoint(graph: Graph) -> List[List[EdgeIndex]]:
    edges = graph.edges
    table: List[List[EdgeIndex]] = [[] for _ in edges]
    for i, first in enumerate(edges):
        ends = set(first.endpoints)
        for j, second in enumerate(edges):
            if i == j:
                continue
            if second.node_a not in ends and second.node_b not in ends:
                table[i].append(j)
    return table


def build_adjacency(graph: Graph) -> AdjacencyIndex:
    """Compute the incidence map, the disjoint-edge map and initial lengths."""

    incidence = _incidence(graph)
    disjoint = _disjoint(graph)
    lengths = tuple(
        vector2.length(vector2.subtract(graph.position(e.node_b), graph.position(e.node_a)))
        for e in graph.edges
    )
    logger.info(
        "Built adjacency for %d node(s) and %d edge(s); %d disjoint pair(s)",
        graph.node_count,
        graph.edge_count,
        sum(len(row) for row in disjoint) // 2,
    )
    return AdjacencyIndex(
        incident_edges=tuple(tuple(row) for row in incidence),
        disjoint_edges=tuple(tuple(row) for row in disjoint),
        initial_edge_lengths=lengths,
    )


__all__ = ["AdjacencyIndex", "build_adjacency"]
