from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Optional, Protocol, Sequence

from .. import vector2
from ..logging_utils import apply_debug_logging
from .config import get_default_settings
from .energy import EnergyTerm, gradients, total_energy
from .model import (
    Graph,
    IterationResult,
    SessionOutcome,
    SessionState,
    SolverHooks,
    SolverSettings,
)

logger = logging.getLogger(__name__)

Observer = Callable[[Graph], None]
TickCallback = Callable[[], None]


class Scheduler(Protocol):
    """Host capability that runs ``callback`` when the next step is due."""

    def schedule_next(self, callback: TickCallback) -> None:
        ...


class ImmediateScheduler:
    """Run scheduled callbacks straight away, as a flat loop.

    Callbacks scheduled while another one runs are queued and drained by
    the outermost call, so long sessions never grow the Python stack.
    """

    def __init__(self) -> None:
        self._queue: Deque[TickCallback] = deque()
        self._draining = False

    def schedule_next(self, callback: TickCallback) -> None:
        self._queue.append(callback)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._queue.popleft()()
        finally:
            self._draining = False


class FrameScheduler:
    """Hold one pending callback until the host signals the next frame."""

    def __init__(self) -> None:
        self._pending: Optional[TickCallback] = None
        self.frames = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule_next(self, callback: TickCallback) -> None:
        if self._pending is not None:
            raise RuntimeError("a frame callback is already pending")
        self._pending = callback

    def advance(self) -> bool:
        """Fire the pending callback, if any. Returns whether one ran."""

        callback, self._pending = self._pending, None
        if callback is None:
            return False
        self.frames += 1
        callback()
        return True

    def run_until_idle(self, max_frames: Optional[int] = None) -> int:
        ran = 0
        while self.pending and (max_frames is None or ran < max_frames):
            self.advance()
            ran += 1
        return ran


class CancellationToken:
    """Session-scoped running flag. Cleared once by :meth:`cancel`."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def running(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def step(
    graph: Graph,
    settings: SolverSettings,
    *,
    terms: Optional[Sequence[EnergyTerm]] = None,
) -> IterationResult:
    """Move every free node once along its gradient and measure the energy change."""

    energy_before = total_energy(graph, terms)
    grads = gradients(graph, terms)
    factor = settings.effective_step

    moved = []
    for idx in range(graph.node_count):
        if graph.is_fixed(idx):
            continue
        delta = vector2.scale((float(grads[idx, 0]), float(grads[idx, 1])), factor)
        graph.set_position(idx, vector2.add(graph.position(idx), delta))
        moved.append(idx)

    energy_after = total_energy(graph, terms)
    converged = abs(energy_after - energy_before) < settings.tolerance
    logger.debug(
        "Step moved %d node(s): energy %.9g -> %.9g converged=%s",
        len(moved),
        energy_before,
        energy_after,
        converged,
    )
    return IterationResult(
        converged=converged,
        energy_before=energy_before,
        energy_after=energy_after,
        moved=moved,
    )


def iterate(
    graph: Graph,
    settings: SolverSettings,
    *,
    terms: Optional[Sequence[EnergyTerm]] = None,
) -> bool:
    """Run one solver iteration on ``graph`` and report convergence."""

    return step(graph, settings, terms=terms).converged


class LayoutSession:
    """One cooperative optimisation run over a graph.

    The session performs one iteration per scheduler tick and hands control
    back to the host in between. Only one session should drive a graph at a
    time; starting another while this one runs requires stopping it first.
    """

    def __init__(
        self,
        graph: Graph,
        settings: SolverSettings,
        observer: Optional[Observer] = None,
        *,
        token: Optional[CancellationToken] = None,
        scheduler: Optional[Scheduler] = None,
        hooks: Optional[SolverHooks] = None,
        terms: Optional[Sequence[EnergyTerm]] = None,
    ) -> None:
        self.graph = graph
        self.settings = settings
        self.observer = observer
        self.token = token if token is not None else CancellationToken()
        self.scheduler: Scheduler = scheduler if scheduler is not None else ImmediateScheduler()
        self.hooks = hooks if hooks is not None else SolverHooks()
        self.terms = terms
        self.state = SessionState.RUNNING
        self.outcome: Optional[SessionOutcome] = None
        self.iterations = 0
        self.converged = False
        self.energy: Optional[float] = None

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    def start(self) -> "LayoutSession":
        logger.info(
            "Starting layout session: %d node(s), %d edge(s), max_iterations=%d",
            self.graph.node_count,
            self.graph.edge_count,
            self.settings.max_iterations,
        )
        self.scheduler.schedule_next(self._tick)
        return self

    def stop(self) -> None:
        """Request a stop at the next iteration boundary."""

        self.token.cancel()

    def _finish(self, outcome: SessionOutcome) -> None:
        self.state = SessionState.STOPPED
        self.outcome = outcome
        logger.info(
            "Layout session stopped: outcome=%s iterations=%d energy=%s",
            outcome.value,
            self.iterations,
            self.energy,
        )
        self.hooks.stop(self)

    def _tick(self) -> None:
        if self.state is SessionState.STOPPED:
            return
        if self.token.cancelled:
            self._finish(SessionOutcome.CANCELLED)
            return
        if self.iterations >= self.settings.max_iterations:
            self._finish(SessionOutcome.EXHAUSTED)
            return

        index = self.iterations
        try:
            self.hooks.iteration_start(index)
            result = step(self.graph, self.settings, terms=self.terms)
            self.iterations += 1
            self.energy = result.energy_after
            self.hooks.iteration_end(index, result.energy_before, result.energy_after)
            if self.observer is not None:
                self.observer(self.graph)
            self.hooks.convergence(index, result.converged)
        except Exception:
            logger.error("Layout session failed during iteration %d", index)
            self._finish(SessionOutcome.FAILED)
            raise

        if result.converged:
            self.converged = True
            self._finish(SessionOutcome.CONVERGED)
        elif self.iterations >= self.settings.max_iterations:
            self._finish(SessionOutcome.EXHAUSTED)
        else:
            self.scheduler.schedule_next(self._tick)


def run_session(
    graph: Graph,
    settings: Optional[SolverSettings] = None,
    observer: Optional[Observer] = None,
    *,
    token: Optional[CancellationToken] = None,
    scheduler: Optional[Scheduler] = None,
    hooks: Optional[SolverHooks] = None,
    terms: Optional[Sequence[EnergyTerm]] = None,
) -> LayoutSession:
    """Start a layout session and return it.

    With the default :class:`ImmediateScheduler` the session has already
    stopped when this returns. With a :class:`FrameScheduler` it stays
    running until the host advances enough frames.
    """

    session = LayoutSession(
        graph,
        settings if settings is not None else get_default_settings(),
        observer,
        token=token,
        scheduler=scheduler,
        hooks=hooks,
        terms=terms,
    )
    return session.start()


def stop_session(session: LayoutSession) -> None:
    session.stop()


__all__ = [
    "Scheduler",
    "ImmediateScheduler",
    "FrameScheduler",
    "CancellationToken",
    "LayoutSession",
    "step",
    "iterate",
    "run_session",
    "stop_session",
]


apply_debug_logging(globals(), logger=logger, skip={"Scheduler"})
