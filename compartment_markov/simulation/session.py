"""Simulation session: lifecycle, per-frame tick, and published display state.

The session owns the entity list, the layout, the clock, and the history. It
never reschedules itself: every frame is requested from an injected
``FrameScheduler`` and the single pending handle is cancelled on pause, reset
and teardown.

Per tick, in order:

1. advance visual motion for every entity;
2. increment the frame counter;
3. run a discrete batch for every entity whose stagger offset lines up with
   the frame counter, using the live transition probabilities;
4. recount entities per compartment;
5. on every ``frames_per_batch``-th frame, advance the step counter, append
   a history sample, and publish a new ``DisplayState``.

Readers get ``DisplayState`` (published at batch boundaries and lifecycle
changes) and ``FrameSnapshot`` (per-frame positions); neither exposes the
live entity records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Any

import numpy as np

from compartment_markov.config.types import EngineConfig, SimulationParams
from compartment_markov.domain.entity import Compartment, Entity, create_entity
from compartment_markov.domain.layout import Layout, compute_layout
from compartment_markov.simulation.history import HistoryBuffer, HistorySample
from compartment_markov.simulation.motion import advance_visual
from compartment_markov.simulation.scheduler import FrameScheduler
from compartment_markov.simulation.transition import advance_discrete

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of one simulation session."""

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class DisplayState:
    """Snapshot published to subscribers; safe to hold on to."""

    state: SessionState
    count_a: int
    count_b: int
    step: int
    history: tuple[HistorySample, ...]
    name_a: str
    name_b: str


@dataclass(frozen=True)
class FrameSnapshot:
    """Per-frame rendering view of every entity."""

    frame: int
    positions: np.ndarray  # (N, 2) float
    in_b: np.ndarray  # (N,) bool; current compartment is B
    transitioning: np.ndarray  # (N,) bool
    count_a: int
    count_b: int

    def __len__(self) -> int:
        return int(self.positions.shape[0])


DisplayCallback = Callable[[DisplayState], None]


class CompartmentSession:
    """One activation of the two-compartment simulation."""

    def __init__(
        self,
        scheduler: FrameScheduler,
        params: SimulationParams | None = None,
        config: EngineConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._params = params or SimulationParams()
        self._config = config or EngineConfig()
        self._rng = rng if rng is not None else Random()
        self._layout: Layout | None = None
        self._entities: list[Entity] = []
        self._unplaced = False
        self._state = SessionState.STOPPED
        self._frame = 0
        self._step = 0
        self._count_a = 0
        self._count_b = 0
        self._history = HistoryBuffer(self._config.history_capacity)
        self._handle: Any = None
        self._subscribers: list[DisplayCallback] = []
        self._torn_down = False
        self._display = self._stopped_display()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def params(self) -> SimulationParams:
        return self._params

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def layout(self) -> Layout | None:
        return self._layout

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def step(self) -> int:
        return self._step

    @property
    def counts(self) -> tuple[int, int]:
        """Authoritative (count_a, count_b) from the most recent scan."""
        return self._count_a, self._count_b

    @property
    def history(self) -> tuple[HistorySample, ...]:
        return self._history.snapshot()

    @property
    def display(self) -> DisplayState:
        """Most recently published display state."""
        return self._display

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    @property
    def has_pending_frame(self) -> bool:
        return self._handle is not None

    def entities(self) -> tuple[Entity, ...]:
        """Shallow tuple of the live records, for inspection only."""
        return tuple(self._entities)

    def frame_snapshot(self) -> FrameSnapshot:
        n = len(self._entities)
        positions = np.empty((n, 2), dtype=float)
        in_b = np.empty(n, dtype=bool)
        transitioning = np.empty(n, dtype=bool)
        for i, entity in enumerate(self._entities):
            positions[i, 0] = entity.x
            positions[i, 1] = entity.y
            in_b[i] = entity.compartment is Compartment.B
            transitioning[i] = entity.transitioning
        return FrameSnapshot(
            frame=self._frame,
            positions=positions,
            in_b=in_b,
            transitioning=transitioning,
            count_a=self._count_a,
            count_b=self._count_b,
        )

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, callback: DisplayCallback) -> Callable[[], None]:
        """Register ``callback`` for published display states; returns an unsubscribe."""
        self._subscribers.append(callback)
        callback(self._display)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, display: DisplayState) -> None:
        self._display = display
        for callback in list(self._subscribers):
            callback(display)

    def _live_display(self) -> DisplayState:
        return DisplayState(
            state=self._state,
            count_a=self._count_a,
            count_b=self._count_b,
            step=self._step,
            history=self._history.snapshot(),
            name_a=self._params.name_a,
            name_b=self._params.name_b,
        )

    def _stopped_display(self) -> DisplayState:
        """Display while stopped: configured populations, not simulated ones."""
        return DisplayState(
            state=SessionState.STOPPED,
            count_a=self._params.population_a,
            count_b=self._params.population_b,
            step=0,
            history=(),
            name_a=self._params.name_a,
            name_b=self._params.name_b,
        )

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def update_params(self, **changes: Any) -> SimulationParams:
        """Replace live parameters; values are clamped.

        Probabilities apply at each entity's next batch. Population edits only
        apply at the next start from STOPPED.
        """
        self._params = replace(self._params, **changes)
        if self._state is SessionState.STOPPED and not self._torn_down:
            self._publish(self._stopped_display())
        return self._params

    def resize(self, width: float, height: float) -> Layout | None:
        """Recompute compartment and channel geometry for a new viewport."""
        self._layout = compute_layout(width, height)
        if self._layout is None:
            logger.debug("viewport %sx%s too small; ticks will no-op", width, height)
        elif self._unplaced:
            self._place_entities(self._layout)
        return self._layout

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._torn_down:
            logger.warning("start() called on a torn-down session; ignoring")
            return
        if self._state is SessionState.RUNNING:
            return
        if self._state is SessionState.PAUSED:
            self._state = SessionState.RUNNING
            logger.info("session resumed at frame %d", self._frame)
            self._publish(self._live_display())
            self._schedule()
            return

        self._cancel_pending()
        self._populate()
        self._frame = 0
        self._step = 0
        self._recount()
        self._history.clear()
        self._history.append(0, self._count_a, self._count_b)
        self._state = SessionState.RUNNING
        logger.info(
            "session started: %d in %s, %d in %s",
            self._count_a,
            self._params.name_a,
            self._count_b,
            self._params.name_b,
        )
        self._publish(self._live_display())
        self._schedule()

    def pause(self) -> None:
        if self._state is not SessionState.RUNNING:
            return
        self._cancel_pending()
        self._state = SessionState.PAUSED
        logger.info("session paused at frame %d (step %d)", self._frame, self._step)
        self._publish(self._live_display())

    def reset(self) -> None:
        self._cancel_pending()
        if self._state is not SessionState.STOPPED:
            logger.info("session reset")
        self._state = SessionState.STOPPED
        self._clear()
        if not self._torn_down:
            self._publish(self._stopped_display())

    def teardown(self) -> None:
        """Stop for good; later frame callbacks and lifecycle calls are no-ops."""
        self._cancel_pending()
        self._state = SessionState.STOPPED
        self._clear()
        self._subscribers.clear()
        self._torn_down = True

    def _clear(self) -> None:
        self._entities = []
        self._unplaced = False
        self._frame = 0
        self._step = 0
        self._count_a = 0
        self._count_b = 0
        self._history.clear()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _schedule(self) -> None:
        self._handle = self._scheduler.request_frame(self._on_frame)

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_frame(self) -> None:
        self._handle = None
        if self._state is not SessionState.RUNNING:
            return
        self.tick()
        if self._state is SessionState.RUNNING and self._handle is None:
            self._schedule()

    def tick(self) -> bool:
        """Advance one frame; returns ``False`` when the tick was skipped."""
        if self._state is not SessionState.RUNNING:
            return False
        layout = self._layout
        if layout is None:
            return False

        config = self._config
        rng = self._rng
        entities = self._entities

        for entity in entities:
            bounds = None if entity.transitioning else layout.bounds_for(entity.compartment)
            advance_visual(entity, bounds, config.transition_speed, rng, config)

        self._frame += 1
        frame = self._frame
        fpb = config.frames_per_batch

        params = self._params
        changed = 0
        for entity in entities:
            if (frame + entity.stagger_offset) % fpb != 0:
                continue
            if advance_discrete(
                entity,
                params.p_a_to_b,
                params.p_b_to_a,
                config.trials_per_batch,
                layout,
                rng,
                destination_inset=config.destination_inset,
                arc_jitter=config.arc_jitter,
            ):
                changed += 1

        self._recount()

        if frame % fpb == 0:
            self._step += config.trials_per_batch
            self._history.append(self._step, self._count_a, self._count_b)
            logger.debug(
                "step %d: %s=%d %s=%d (%d transitions this frame)",
                self._step,
                params.name_a,
                self._count_a,
                params.name_b,
                self._count_b,
                changed,
            )
            self._publish(self._live_display())
        return True

    # ------------------------------------------------------------------
    # Population helpers
    # ------------------------------------------------------------------

    def _recount(self) -> None:
        count_b = sum(1 for entity in self._entities if entity.compartment is Compartment.B)
        self._count_a = len(self._entities) - count_b
        self._count_b = count_b

    def _populate(self) -> None:
        params = self._params
        config = self._config
        rng = self._rng
        layout = self._layout
        entities: list[Entity] = []
        for compartment, count in (
            (Compartment.A, params.population_a),
            (Compartment.B, params.population_b),
        ):
            for _ in range(count):
                if layout is not None:
                    x, y = layout.bounds_for(compartment).random_point(config.spawn_inset, rng)
                else:
                    x, y = 0.0, 0.0
                entities.append(
                    create_entity(
                        compartment, x, y, config.frames_per_batch, config.initial_speed, rng
                    )
                )
        self._entities = entities
        self._unplaced = layout is None and bool(entities)

    def _place_entities(self, layout: Layout) -> None:
        for entity in self._entities:
            if entity.transitioning:
                continue
            bounds = layout.bounds_for(entity.compartment)
            entity.x, entity.y = bounds.random_point(self._config.spawn_inset, self._rng)
        self._unplaced = False
