"""Energy and gradient evaluation for the repulsive edge potential.

Every edge contributes ``1 / d`` to the energy, where ``d`` is the distance
between its endpoints floored at :data:`MIN_DISTANCE`. The gradient of a
free node is the sum of ``delta / d**3`` over its incident edges, with
``delta`` pointing from the other endpoint to the node. That vector is the
direction in which the energy falls fastest for the node, so the solver
steps along it and connected nodes spread apart; there is no attractive
term.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .. import vector2
from ..logging_utils import apply_debug_logging
from ..vector2 import Vec2
from .adjacency import AdjacencyIndex
from .model import MIN_DISTANCE, Graph, NodeIndex

logger = logging.getLogger(__name__)


class EnergyTerm:
    """One additive contribution to the layout potential.

    Subclasses return the scalar energy and an ``(n, 2)`` array of
    per-node gradients. Fixed nodes are zeroed by the evaluator, so terms
    do not need to special-case them.
    """

    name = "term"

    def energy(self, graph: Graph, adjacency: AdjacencyIndex) -> float:
        raise NotImplementedError

    def gradients(self, graph: Graph, adjacency: AdjacencyIndex) -> np.ndarray:
        raise NotImplementedError


class EdgeRepulsion(EnergyTerm):
    """Inverse-distance repulsion between the two endpoints of every edge."""

    name = "edge-repulsion"

    def _deltas(self, graph: Graph):
        positions = graph.positions()
        a, b = graph.edge_endpoint_arrays()
        # delta points from node_a to node_b
        delta = positions[b] - positions[a]
        dist = np.maximum(np.hypot(delta[:, 0], delta[:, 1]), MIN_DISTANCE)
        return a, b, delta, dist

    def energy(self, graph: Graph, adjacency: AdjacencyIndex) -> float:
        if graph.edge_count == 0:
            return 0.0
        _, _, _, dist = self._deltas(graph)
        return float(np.sum(1.0 / dist))

    def gradients(self, graph: Graph, adjacency: AdjacencyIndex) -> np.ndarray:
        grads = np.zeros((graph.node_count, 2), dtype=float)
        if graph.edge_count == 0:
            return grads
        a, b, delta, dist = self._deltas(graph)
        contrib = delta / (dist ** 3)[:, None]
        np.add.at(grads, b, contrib)
        np.add.at(grads, a, -contrib)
        return grads


DEFAULT_TERMS: Sequence[EnergyTerm] = (EdgeRepulsion(),)


def _terms(terms: Optional[Sequence[EnergyTerm]]) -> Sequence[EnergyTerm]:
    return DEFAULT_TERMS if terms is None else terms


def total_energy(graph: Graph, terms: Optional[Sequence[EnergyTerm]] = None) -> float:
    adjacency = graph.adjacency
    return float(sum(term.energy(graph, adjacency) for term in _terms(terms)))


def gradients(graph: Graph, terms: Optional[Sequence[EnergyTerm]] = None) -> np.ndarray:
    """Return the ``(n, 2)`` gradient array, zero on every fixed node."""

    adjacency = graph.adjacency
    grads = np.zeros((graph.node_count, 2), dtype=float)
    for term in _terms(terms):
        grads += term.gradients(graph, adjacency)
    grads[graph.fixed_mask] = 0.0
    return grads


def node_gradient(graph: Graph, node: NodeIndex) -> Vec2:
    """Gradient of the edge repulsion term for a single node."""

    if graph.is_fixed(node):
        return (0.0, 0.0)
    current = graph.position(node)
    grad: Vec2 = (0.0, 0.0)
    for edge_index in graph.adjacency.incident(node):
        other = graph.position(graph.edge(edge_index).other(node))
        delta = vector2.subtract(current, other)
        dist = max(vector2.length(delta), MIN_DISTANCE)
        grad = vector2.add(grad, vector2.scale(delta, 1.0 / (dist * dist * dist)))
    return grad


def edge_lengths(graph: Graph) -> np.ndarray:
    if graph.edge_count == 0:
        return np.zeros(0, dtype=float)
    positions = graph.positions()
    a, b = graph.edge_endpoint_arrays()
    delta = positions[b] - positions[a]
    return np.hypot(delta[:, 0], delta[:, 1])


__all__ = [
    "EnergyTerm",
    "EdgeRepulsion",
    "DEFAULT_TERMS",
    "total_energy",
    "gradients",
    "node_gradient",
    "edge_lengths",
]


apply_debug_logging(globals(), logger=logger, skip={"_terms"})
