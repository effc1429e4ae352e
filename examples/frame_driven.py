"""Example: drive a session one frame at a time and stop it from outside."""

from repulsive_layout import FrameScheduler, SolverSettings, build_graph, run_session

NODES = [(0.0, 0.0, True), (3.0, 1.0), (1.0, 4.0), (-2.0, 2.0)]
EDGES = [(0, 1), (0, 2), (1, 2), (2, 3)]


def main() -> None:
    graph, _ = build_graph(NODES, EDGES)
    frames = FrameScheduler()

    def draw(g) -> None:
        print("frame", frames.frames, [f"({x:.3f}, {y:.3f})" for x, y in g.point_coords().values()])

    session = run_session(
        graph,
        SolverSettings(step_size=5.0, tolerance=1e-9, max_iterations=100),
        draw,
        scheduler=frames,
    )
    frames.run_until_idle(max_frames=10)
    session.stop()
    frames.run_until_idle()
    print("Outcome:", session.outcome.value, "after", session.iterations, "iterations")


if __name__ == "__main__":
    main()
