"""Core data structures for the layout engine."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..vector2 import Vec2

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .adjacency import AdjacencyIndex

NodeIndex = int
EdgeIndex = int

# Shared floor for edge lengths in both the energy and the gradient.
MIN_DISTANCE = 1e-6


class OutOfRangeError(IndexError):
    """Raised when a node or edge index does not address the graph."""

    def __init__(self, kind: str, index: object, size: int):
        super().__init__(f"{kind} index {index!r} out of range for {size} {kind}(s)")
        self.kind = kind
        self.index = index
        self.size = size


class FixedNodeError(ValueError):
    """Raised when a caller tries to move a fixed node."""

    def __init__(self, index: NodeIndex):
        super().__init__(f"node {index} is fixed and cannot be moved")
        self.index = index


@dataclass(frozen=True)
class Node:
    """Snapshot of one node: its position and whether it is anchored."""

    x: float
    y: float
    fixed: bool = False


@dataclass(frozen=True)
class Edge:
    """Unordered connection between two node indices."""

    node_a: NodeIndex
    node_b: NodeIndex

    @property
    def endpoints(self) -> Tuple[NodeIndex, NodeIndex]:
        return (self.node_a, self.node_b)

    def other(self, node: NodeIndex) -> NodeIndex:
        return self.node_b if self.node_a == node else self.node_a


def _check_index(kind: str, index: object, size: int) -> int:
    # bool is an int subclass but never a meaningful index
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise OutOfRangeError(kind, index, size)
    value = int(index)
    if value < 0 or value >= size:
        raise OutOfRangeError(kind, index, size)
    return value


class Graph:
    """Owner of the layout state: node positions, fixed flags and edges.

    Positions are held in an ``(n, 2)`` float array and are the only state
    that changes during a layout session. The edge list is frozen at
    construction, so the adjacency index derived from it stays valid for
    the lifetime of the graph.
    """

    def __init__(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        count = len(nodes)
        self._positions = np.zeros((count, 2), dtype=float)
        self._fixed = np.zeros(count, dtype=bool)
        for idx, node in enumerate(nodes):
            self._positions[idx] = (float(node.x), float(node.y))
            self._fixed[idx] = bool(node.fixed)

        checked: List[Edge] = []
        for edge in edges:
            a = _check_index("node", edge.node_a, count)
            b = _check_index("node", edge.node_b, count)
            checked.append(Edge(a, b))
        self._edges: Tuple[Edge, ...] = tuple(checked)
        self._adjacency: Optional["AdjacencyIndex"] = None

    @property
    def node_count(self) -> int:
        return int(self._positions.shape[0])

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def fixed_mask(self) -> np.ndarray:
        return self._fixed.copy()

    @property
    def adjacency(self) -> "AdjacencyIndex":
        if self._adjacency is None:
            from .adjacency import build_adjacency

            self._adjacency = build_adjacency(self)
        return self._adjacency

    def node(self, index: NodeIndex) -> Node:
        idx = _check_index("node", index, self.node_count)
        x, y = self._positions[idx]
        return Node(float(x), float(y), bool(self._fixed[idx]))

    def nodes(self) -> List[Node]:
        return [self.node(idx) for idx in range(self.node_count)]

    def edge(self, index: EdgeIndex) -> Edge:
        return self._edges[_check_index("edge", index, self.edge_count)]

    def position(self, index: NodeIndex) -> Vec2:
        idx = _check_index("node", index, self.node_count)
        return (float(self._positions[idx, 0]), float(self._positions[idx, 1]))

    def is_fixed(self, index: NodeIndex) -> bool:
        return bool(self._fixed[_check_index("node", index, self.node_count)])

    def set_position(self, index: NodeIndex, pos: Vec2) -> None:
        idx = _check_index("node", index, self.node_count)
        if self._fixed[idx]:
            raise FixedNodeError(idx)
        self._positions[idx] = (float(pos[0]), float(pos[1]))

    def positions(self) -> np.ndarray:
        """Return a copy of the ``(n, 2)`` position array."""

        return self._positions.copy()

    def point_coords(self) -> Dict[NodeIndex, Vec2]:
        return {idx: self.position(idx) for idx in range(self.node_count)}

    def edge_endpoint_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        a = np.fromiter((e.node_a for e in self._edges), dtype=int, count=self.edge_count)
        b = np.fromiter((e.node_b for e in self._edges), dtype=int, count=self.edge_count)
        return a, b

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={self.node_count}, edges={self.edge_count}, "
            f"fixed={int(self._fixed.sum())})"
        )


def _require_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


@dataclass
class SolverSettings:
    """Knobs for the gradient-descent solver."""

    step_size: float = 1.0
    update_scale: float = 1.0
    tolerance: float = 1e-6
    max_iterations: int = 500

    def __post_init__(self) -> None:
        self.step_size = _require_finite("step_size", self.step_size)
        self.update_scale = _require_finite("update_scale", self.update_scale)
        self.tolerance = _require_finite("tolerance", self.tolerance)
        if self.step_size <= 0:
            raise ValueError(f"step_size must be > 0, got {self.step_size}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, numbers.Integral):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        self.max_iterations = int(self.max_iterations)
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")

    @property
    def effective_step(self) -> float:
        return self.step_size * self.update_scale

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], defaults: Optional["SolverSettings"] = None) -> "SolverSettings":
        """Build settings from camelCase or snake_case keys."""

        from .config import get_default_settings
        from .utils import coerce_float, coerce_index

        if not isinstance(data, Mapping):
            raise ValueError(f"settings must be a mapping, got {type(data).__name__}")
        base = defaults if defaults is not None else get_default_settings()
        aliases = {
            "step_size": ("step_size", "stepSize"),
            "update_scale": ("update_scale", "updateScale"),
            "tolerance": ("tolerance",),
            "max_iterations": ("max_iterations", "maxIterations"),
        }
        values: Dict[str, Any] = {}
        for attr, keys in aliases.items():
            raw = next((data[key] for key in keys if key in data), None)
            if raw is None:
                values[attr] = getattr(base, attr)
                continue
            if attr == "max_iterations":
                count = coerce_index(raw)
                if count is None:
                    raise ValueError(f"setting {attr!r} is not an integer: {raw!r}")
                values[attr] = count
                continue
            number = coerce_float(raw)
            if number is None:
                raise ValueError(f"setting {attr!r} is not a number: {raw!r}")
            values[attr] = number
        return cls(**values)


class SessionState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class SessionOutcome(Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class SolverHooks:
    """Optional observability callbacks invoked at fixed points of a session."""

    on_iteration_start: Optional[Callable[[int], None]] = None
    on_iteration_end: Optional[Callable[[int, float, float], None]] = None
    on_convergence: Optional[Callable[[int, bool], None]] = None
    on_stop: Optional[Callable[[Any], None]] = None

    def iteration_start(self, iteration: int) -> None:
        if self.on_iteration_start is not None:
            self.on_iteration_start(iteration)

    def iteration_end(self, iteration: int, energy_before: float, energy_after: float) -> None:
        if self.on_iteration_end is not None:
            self.on_iteration_end(iteration, energy_before, energy_after)

    def convergence(self, iteration: int, converged: bool) -> None:
        if self.on_convergence is not None:
            self.on_convergence(iteration, converged)

    def stop(self, session: Any) -> None:
        if self.on_stop is not None:
            self.on_stop(session)


@dataclass
class IterationResult:
    """Energies measured around one gradient step."""

    converged: bool
    energy_before: float
    energy_after: float
    moved: List[NodeIndex] = field(default_factory=list)


__all__ = [
    "MIN_DISTANCE",
    "NodeIndex",
    "EdgeIndex",
    "OutOfRangeError",
    "FixedNodeError",
    "Node",
    "Edge",
    "Graph",
    "SolverSettings",
    "SessionState",
    "SessionOutcome",
    "SolverHooks",
    "IterationResult",
]
