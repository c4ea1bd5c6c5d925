"""Simulation engine: transitions, motion, history, scheduling, sessions."""

from compartment_markov.simulation.headless import run_headless
from compartment_markov.simulation.history import HistoryBuffer, HistorySample
from compartment_markov.simulation.motion import advance_visual, cubic_bezier
from compartment_markov.simulation.scheduler import (
    FrameScheduler,
    ManualFrameScheduler,
    TimerFrameScheduler,
)
from compartment_markov.simulation.session import (
    CompartmentSession,
    DisplayState,
    FrameSnapshot,
    SessionState,
)
from compartment_markov.simulation.transition import (
    advance_discrete,
    begin_transition,
    build_arc,
    run_trials,
)

__all__ = [
    "CompartmentSession",
    "DisplayState",
    "FrameScheduler",
    "FrameSnapshot",
    "HistoryBuffer",
    "HistorySample",
    "ManualFrameScheduler",
    "SessionState",
    "TimerFrameScheduler",
    "advance_discrete",
    "advance_visual",
    "begin_transition",
    "build_arc",
    "cubic_bezier",
    "run_headless",
    "run_trials",
]
