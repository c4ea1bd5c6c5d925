"""Two-compartment stochastic simulation engine with a matplotlib front end."""

from compartment_markov.config.types import EngineConfig, SimulationParams
from compartment_markov.domain.entity import Compartment, Entity
from compartment_markov.simulation.scheduler import ManualFrameScheduler
from compartment_markov.simulation.session import (
    CompartmentSession,
    DisplayState,
    FrameSnapshot,
    SessionState,
)

__all__ = [
    "Compartment",
    "CompartmentSession",
    "DisplayState",
    "EngineConfig",
    "Entity",
    "FrameSnapshot",
    "ManualFrameScheduler",
    "SessionState",
    "SimulationParams",
]
