"""Layout façade: graph construction, evaluation and the iterative solver."""

from __future__ import annotations

from .adjacency import AdjacencyIndex, build_adjacency
from .builder import build_graph, build_graph_from_document
from .config import get_default_settings, reset_default_settings, set_default_settings
from .energy import (
    DEFAULT_TERMS,
    EdgeRepulsion,
    EnergyTerm,
    edge_lengths,
    gradients,
    node_gradient,
    total_energy,
)
from .model import (
    MIN_DISTANCE,
    Edge,
    FixedNodeError,
    Graph,
    IterationResult,
    Node,
    OutOfRangeError,
    SessionOutcome,
    SessionState,
    SolverHooks,
    SolverSettings,
)
from .solver_core import (
    CancellationToken,
    FrameScheduler,
    ImmediateScheduler,
    LayoutSession,
    Scheduler,
    iterate,
    run_session,
    step,
    stop_session,
)
from .utils import normalize_point_coords


__all__ = [
    "AdjacencyIndex",
    "CancellationToken",
    "DEFAULT_TERMS",
    "Edge",
    "EdgeRepulsion",
    "EnergyTerm",
    "FixedNodeError",
    "FrameScheduler",
    "Graph",
    "ImmediateScheduler",
    "IterationResult",
    "LayoutSession",
    "MIN_DISTANCE",
    "Node",
    "OutOfRangeError",
    "Scheduler",
    "SessionOutcome",
    "SessionState",
    "SolverHooks",
    "SolverSettings",
    "build_adjacency",
    "build_graph",
    "build_graph_from_document",
    "edge_lengths",
    "get_default_settings",
    "gradients",
    "iterate",
    "node_gradient",
    "normalize_point_coords",
    "reset_default_settings",
    "run_session",
    "set_default_settings",
    "step",
    "stop_session",
    "total_energy",
]
