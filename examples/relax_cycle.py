"""Example: relax a four-node cycle anchored at one corner."""

from repulsive_layout import SolverSettings, build_graph, run_session

NODES = [
    {"x": 0.0, "y": 0.0, "fixed": True},
    {"x": 10.0, "y": 0.0},
    {"x": 10.0, "y": 10.0},
    {"x": 0.0, "y": 10.0},
]
EDGES = [(0, 1), (1, 2), (2, 3), (3, 0)]


def main() -> None:
    graph, adjacency = build_graph(NODES, EDGES)
    print("Incident edges:", adjacency.incident_edges)
    print("Disjoint edges:", adjacency.disjoint_edges)

    settings = SolverSettings(step_size=50.0, update_scale=1.0, tolerance=1e-6, max_iterations=200)
    session = run_session(graph, settings)
    print("Outcome:", session.outcome.value)
    print("Iterations:", session.iterations)
    print("Energy:", session.energy)
    for idx, (x, y) in graph.point_coords().items():
        print(f"{idx}: ({x:.6f}, {y:.6f})")


if __name__ == "__main__":
    main()
