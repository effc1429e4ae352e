import pytest

from repulsive_layout import (
    CancellationToken,
    FrameScheduler,
    ImmediateScheduler,
    SessionOutcome,
    SessionState,
    SolverHooks,
    SolverSettings,
    build_graph,
    run_session,
    stop_session,
)


def _cycle():
    graph, _ = build_graph(
        [(0.0, 0.0, True), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)],
        [(0, 1), (1, 2), (2, 3), (3, 0)],
    )
    return graph


def test_budget_exhaustion_stops_after_max_iterations():
    graph = _cycle()
    calls = []
    session = run_session(
        graph,
        SolverSettings(step_size=1.0, tolerance=0.0, max_iterations=3),
        lambda g: calls.append(g),
    )

    assert session.state is SessionState.STOPPED
    assert session.outcome is SessionOutcome.EXHAUSTED
    assert session.iterations == 3
    assert not session.converged
    assert len(calls) == 3
    assert all(g is graph for g in calls)
    assert session.token.running


def test_zero_budget_runs_nothing():
    graph = _cycle()
    before = graph.positions()
    session = run_session(graph, SolverSettings(max_iterations=0))

    assert session.outcome is SessionOutcome.EXHAUSTED
    assert session.iterations == 0
    assert (graph.positions() == before).all()


def test_session_converges_when_energy_settles():
    graph, _ = build_graph([(0.0, 0.0, True), (10.0, 0.0)], [(0, 1)])
    session = run_session(
        graph, SolverSettings(step_size=1e4, tolerance=1e-4, max_iterations=1000)
    )

    assert session.outcome is SessionOutcome.CONVERGED
    assert session.converged
    assert 0 < session.iterations < 1000
    assert graph.position(1)[0] > 10.0
    assert session.energy == pytest.approx(1.0 / graph.position(1)[0])


def test_resting_graph_converges_on_first_iteration():
    graph, _ = build_graph([(1.0, 1.0, True)], [])
    session = run_session(graph, SolverSettings(tolerance=1e-3, max_iterations=10))
    assert session.outcome is SessionOutcome.CONVERGED
    assert session.iterations == 1
    assert graph.position(0) == (1.0, 1.0)


def test_cancel_before_first_tick_leaves_graph_untouched():
    graph = _cycle()
    before = graph.positions()
    token = CancellationToken()
    token.cancel()
    observed = []

    session = run_session(graph, SolverSettings(tolerance=0.0), observed.append, token=token)

    assert session.state is SessionState.STOPPED
    assert session.outcome is SessionOutcome.CANCELLED
    assert session.iterations == 0
    assert observed == []
    assert (graph.positions() == before).all()
    assert not token.running


def test_stop_before_scheduled_frame_fires():
    graph = _cycle()
    before = graph.positions()
    frames = FrameScheduler()

    session = run_session(graph, SolverSettings(tolerance=0.0), scheduler=frames)
    assert session.running
    assert frames.pending

    stop_session(session)
    assert frames.advance()

    assert session.outcome is SessionOutcome.CANCELLED
    assert session.iterations == 0
    assert (graph.positions() == before).all()
    assert not frames.pending


def test_frame_scheduler_runs_one_iteration_per_frame():
    graph = _cycle()
    frames = FrameScheduler()
    positions = []
    session = run_session(
        graph,
        SolverSettings(step_size=1.0, tolerance=0.0, max_iterations=50),
        lambda g: positions.append(g.positions()),
        scheduler=frames,
    )

    assert session.iterations == 0
    frames.advance()
    frames.advance()
    assert session.iterations == 2
    assert len(positions) == 2
    assert session.running

    session.stop()
    frames.advance()
    assert session.outcome is SessionOutcome.CANCELLED
    assert session.iterations == 2
    assert (graph.positions() == positions[-1]).all()
    assert frames.advance() is False


def test_stop_from_observer_takes_effect_at_next_boundary():
    graph = _cycle()
    holder = {}

    def observer(g):
        if holder["session"].iterations == 2:
            holder["session"].stop()

    frames = FrameScheduler()
    holder["session"] = run_session(
        graph, SolverSettings(tolerance=0.0, max_iterations=10), observer, scheduler=frames
    )
    frames.run_until_idle()

    session = holder["session"]
    assert session.outcome is SessionOutcome.CANCELLED
    assert session.iterations == 2


def test_frame_scheduler_rejects_double_scheduling():
    frames = FrameScheduler()
    frames.schedule_next(lambda: None)
    with pytest.raises(RuntimeError):
        frames.schedule_next(lambda: None)


def test_immediate_scheduler_runs_long_sessions_without_recursion():
    graph = _cycle()
    session = run_session(
        graph,
        SolverSettings(step_size=1e-6, tolerance=0.0, max_iterations=2000),
        scheduler=ImmediateScheduler(),
    )
    assert session.outcome is SessionOutcome.EXHAUSTED
    assert session.iterations == 2000


def test_hooks_fire_in_order():
    graph = _cycle()
    events = []
    hooks = SolverHooks(
        on_iteration_start=lambda i: events.append(("start", i)),
        on_iteration_end=lambda i, before, after: events.append(("end", i, after < before)),
        on_convergence=lambda i, converged: events.append(("converged?", i, converged)),
        on_stop=lambda s: events.append(("stop", s.outcome)),
    )
    run_session(
        graph,
        SolverSettings(step_size=0.01, tolerance=0.0, max_iterations=2),
        lambda g: events.append(("observe",)),
        hooks=hooks,
    )

    assert events == [
        ("start", 0),
        ("end", 0, True),
        ("observe",),
        ("converged?", 0, False),
        ("start", 1),
        ("end", 1, True),
        ("observe",),
        ("converged?", 1, False),
        ("stop", SessionOutcome.EXHAUSTED),
    ]


def test_independent_sessions_have_independent_tokens():
    first_graph, second_graph = _cycle(), _cycle()
    first_frames, second_frames = FrameScheduler(), FrameScheduler()
    settings = SolverSettings(tolerance=0.0, max_iterations=5)

    first = run_session(first_graph, settings, scheduler=first_frames)
    second = run_session(second_graph, settings, scheduler=second_frames)
    first.stop()
    first_frames.run_until_idle()
    second_frames.run_until_idle()

    assert first.outcome is SessionOutcome.CANCELLED
    assert second.outcome is SessionOutcome.EXHAUSTED
    assert second.iterations == 5


def test_observer_sees_updated_iteration_count():
    graph = _cycle()
    counts = []
    holder = {}
    holder["session"] = run_session(
        graph,
        SolverSettings(tolerance=0.0, max_iterations=3),
        lambda g: counts.append(holder["session"].iterations),
        scheduler=FrameScheduler(),
    )
    holder["session"].scheduler.run_until_idle()
    assert counts == [1, 2, 3]


def test_failing_observer_stops_session():
    graph, _ = build_graph([(0.0, 0.0, True), (1.0, 0.0)], [(0, 1)])
    frames = FrameScheduler()
    stopped = []

    def observer(g):
        raise RuntimeError("renderer crashed")

    session = run_session(
        graph,
        SolverSettings(tolerance=0.0, max_iterations=10),
        observer,
        scheduler=frames,
        hooks=SolverHooks(on_stop=stopped.append),
    )
    with pytest.raises(RuntimeError):
        frames.advance()

    assert session.state is SessionState.STOPPED
    assert session.outcome is SessionOutcome.FAILED
    assert session.iterations == 1
    assert session.energy is not None
    assert stopped == [session]
    assert not frames.pending
    assert graph.position(1) == (2.0, 0.0)


def test_failing_hook_stops_session():
    graph = _cycle()
    before = graph.positions()

    def on_start(index):
        raise ValueError("hook failed")

    with pytest.raises(ValueError):
        run_session(graph, SolverSettings(tolerance=0.0), hooks=SolverHooks(on_iteration_start=on_start))
    assert (graph.positions() == before).all()
