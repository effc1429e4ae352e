from . import vector2
from .layout import (
    AdjacencyIndex,
    CancellationToken,
    Edge,
    EdgeRepulsion,
    EnergyTerm,
    FixedNodeError,
    FrameScheduler,
    Graph,
    ImmediateScheduler,
    LayoutSession,
    Node,
    OutOfRangeError,
    SessionOutcome,
    SessionState,
    SolverHooks,
    SolverSettings,
    build_graph,
    build_graph_from_document,
    get_default_settings,
    gradients,
    iterate,
    node_gradient,
    normalize_point_coords,
    run_session,
    set_default_settings,
    stop_session,
    total_energy,
)

__all__ = [
    'vector2',
    'AdjacencyIndex',
    'CancellationToken',
    'Edge',
    'EdgeRepulsion',
    'EnergyTerm',
    'FixedNodeError',
    'FrameScheduler',
    'Graph',
    'ImmediateScheduler',
    'LayoutSession',
    'Node',
    'OutOfRangeError',
    'SessionOutcome',
    'SessionState',
    'SolverHooks',
    'SolverSettings',
    'build_graph',
    'build_graph_from_document',
    'get_default_settings',
    'gradients',
    'iterate',
    'node_gradient',
    'normalize_point_coords',
    'run_session',
    'set_default_settings',
    'stop_session',
    'total_energy',
]
