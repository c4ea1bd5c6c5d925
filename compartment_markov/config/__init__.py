"""Configuration layer: constants and typed config dataclasses."""

from compartment_markov.config.constants import (
    FRAMES_PER_BATCH,
    HISTORY_CAPACITY,
    MAX_POPULATION,
    TRANSITION_SPEED,
    TRIALS_PER_BATCH,
)
from compartment_markov.config.types import (
    EngineConfig,
    SimulationParams,
    clamp_population,
    clamp_probability_pct,
)

__all__ = [
    "EngineConfig",
    "FRAMES_PER_BATCH",
    "HISTORY_CAPACITY",
    "MAX_POPULATION",
    "SimulationParams",
    "TRANSITION_SPEED",
    "TRIALS_PER_BATCH",
    "clamp_population",
    "clamp_probability_pct",
]
