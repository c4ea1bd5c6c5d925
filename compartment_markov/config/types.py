"""Configuration dataclasses for the two-compartment simulation.

``SimulationParams`` holds the live, user-editable knobs. Values are clamped
into range rather than rejected, so a half-typed UI value never stops a
running session. ``EngineConfig`` holds the structural settings fixed for the
lifetime of a session; those are validated eagerly and raise ``ValueError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from compartment_markov.config.constants import (
    ARC_JITTER,
    ARRIVAL_SPEED,
    DEFAULT_POPULATION_A,
    DEFAULT_POPULATION_B,
    DEFAULT_PROB_PCT,
    DESTINATION_INSET,
    ENTITY_RADIUS,
    FRAMES_PER_BATCH,
    HISTORY_CAPACITY,
    INITIAL_SPEED,
    JITTER,
    MAX_NAME_LENGTH,
    MAX_POPULATION,
    MAX_SPEED,
    SPAWN_INSET,
    TRANSITION_SPEED,
    TRIALS_PER_BATCH,
)

__all__ = [
    "EngineConfig",
    "SimulationParams",
    "clamp_population",
    "clamp_probability_pct",
]


def clamp_population(raw: object) -> int:
    """Clamp a population value to ``[0, MAX_POPULATION]``; garbage becomes 0."""
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if math.isnan(value):
        return 0
    return int(min(max(value, 0.0), MAX_POPULATION))


def clamp_probability_pct(raw: object) -> float:
    """Clamp a percentage to ``[0, 100]``; garbage becomes 0."""
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 100.0)


def _clean_name(raw: object, fallback: str) -> str:
    name = str(raw).strip()[:MAX_NAME_LENGTH] if raw is not None else ""
    return name or fallback


@dataclass(frozen=True)
class SimulationParams:
    """Live parameters read by the engine at the instant they are needed.

    Replace the whole instance (``dataclasses.replace``) to edit; the session
    picks up the new object on each entity's next batch boundary.
    """

    population_a: int = DEFAULT_POPULATION_A
    population_b: int = DEFAULT_POPULATION_B
    prob_a_to_b_pct: float = DEFAULT_PROB_PCT
    prob_b_to_a_pct: float = DEFAULT_PROB_PCT
    name_a: str = "A"
    name_b: str = "B"

    def __post_init__(self) -> None:
        # Frozen dataclass: clamp through object.__setattr__.
        object.__setattr__(self, "population_a", clamp_population(self.population_a))
        object.__setattr__(self, "population_b", clamp_population(self.population_b))
        object.__setattr__(self, "prob_a_to_b_pct", clamp_probability_pct(self.prob_a_to_b_pct))
        object.__setattr__(self, "prob_b_to_a_pct", clamp_probability_pct(self.prob_b_to_a_pct))
        object.__setattr__(self, "name_a", _clean_name(self.name_a, "A"))
        object.__setattr__(self, "name_b", _clean_name(self.name_b, "B"))

    @property
    def p_a_to_b(self) -> float:
        """Per-trial probability of A -> B as a fraction."""
        return self.prob_a_to_b_pct / 100.0

    @property
    def p_b_to_a(self) -> float:
        """Per-trial probability of B -> A as a fraction."""
        return self.prob_b_to_a_pct / 100.0

    @property
    def total_population(self) -> int:
        return self.population_a + self.population_b


@dataclass(frozen=True)
class EngineConfig:
    """Structural engine settings, fixed for the lifetime of a session."""

    frames_per_batch: int = FRAMES_PER_BATCH
    trials_per_batch: int = TRIALS_PER_BATCH
    history_capacity: int = HISTORY_CAPACITY
    transition_speed: float = TRANSITION_SPEED
    entity_radius: float = ENTITY_RADIUS
    max_speed: float = MAX_SPEED
    initial_speed: float = INITIAL_SPEED
    arrival_speed: float = ARRIVAL_SPEED
    jitter: float = JITTER
    spawn_inset: float = SPAWN_INSET
    destination_inset: float = DESTINATION_INSET
    arc_jitter: float = ARC_JITTER

    def __post_init__(self) -> None:
        if self.frames_per_batch < 1:
            raise ValueError("frames_per_batch must be >= 1")
        if self.trials_per_batch < 1:
            raise ValueError("trials_per_batch must be >= 1")
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be >= 1")
        if not 0.0 < self.transition_speed <= 1.0:
            raise ValueError("transition_speed must be in (0.0, 1.0]")
        if self.entity_radius < 0.0:
            raise ValueError("entity_radius must be >= 0")
        if self.max_speed <= 0.0:
            raise ValueError("max_speed must be > 0")
        for name in ("initial_speed", "arrival_speed", "jitter", "arc_jitter"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be >= 0")
        if self.spawn_inset < 0.0 or self.destination_inset < 0.0:
            raise ValueError("insets must be >= 0")
