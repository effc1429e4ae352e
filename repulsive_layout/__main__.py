import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from repulsive_layout import (
    SolverHooks,
    SolverSettings,
    build_graph_from_document,
    get_default_settings,
    normalize_point_coords,
    run_session,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _settings_from_args(document: Dict[str, Any], args: argparse.Namespace) -> SolverSettings:
    settings = SolverSettings.from_mapping(document.get("settings") or {}, get_default_settings())
    overrides = {
        "step_size": args.step_size,
        "update_scale": args.update_scale,
        "tolerance": args.tolerance,
        "max_iterations": args.max_iterations,
    }
    return SolverSettings.from_mapping(
        {key: value for key, value in overrides.items() if value is not None},
        settings,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Relax a graph layout under edge repulsion")
    parser.add_argument("path", help="Path to a JSON graph document with 'nodes' and 'edges'")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--step-size", type=float, help="Gradient step size")
    parser.add_argument("--update-scale", type=float, help="Multiplier applied to each step")
    parser.add_argument("--tolerance", type=float, help="Energy difference treated as converged")
    parser.add_argument("--max-iterations", type=int, help="Iteration budget for the session")
    parser.add_argument(
        "--normalize",
        type=float,
        metavar="SCALE",
        help="Also print coordinates normalized into [0, SCALE]",
    )
    parser.add_argument(
        "--output",
        help="Write the final node positions as JSON to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading graph from %s", args.path)
    try:
        with open(args.path, encoding="utf-8") as fin:
            document = json.load(fin)
        graph, _ = build_graph_from_document(document)
        settings = _settings_from_args(document, args)
    except (OSError, ValueError, IndexError) as exc:
        logger.error("Could not load %s: %s", args.path, exc)
        raise SystemExit(1) from exc

    hooks = SolverHooks(
        on_convergence=lambda iteration, converged: logger.debug(
            "Iteration %d converged=%s", iteration, converged
        ),
    )
    session = run_session(graph, settings, hooks=hooks)

    print(f"Outcome: {session.outcome.value if session.outcome else 'running'}")
    print(f"Iterations: {session.iterations} / {settings.max_iterations}")
    print(f"Energy: {session.energy}")
    coords = graph.point_coords()
    print("Coordinates:")
    for idx, (x, y) in coords.items():
        marker = " (fixed)" if graph.is_fixed(idx) else ""
        print(f"  {idx}: ({x:.6f}, {y:.6f}){marker}")

    if args.normalize is not None:
        print("Normed points:")
        for idx, (x, y) in normalize_point_coords(coords, scale=args.normalize).items():
            print(f"  {idx}: ({x:.6f}, {y:.6f})")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing positions to %s", output_path)
        payload = {
            "outcome": session.outcome.value if session.outcome else None,
            "iterations": session.iterations,
            "energy": session.energy,
            "nodes": [
                {"x": node.x, "y": node.y, "fixed": node.fixed} for node in graph.nodes()
            ],
            "edges": [{"nodeA": e.node_a, "nodeB": e.node_b} for e in graph.edges],
        }
        output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Positions written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
