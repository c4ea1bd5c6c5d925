"""Per-agent state for the two-compartment simulation.

Each ``Entity`` is a plain mutable record updated in place every frame. It
holds no references to other entities or to the session that owns it.

Ownership of fields:

- ``compartment`` is written only by the transition engine.
- ``x``/``y``/``vx``/``vy`` and the transition fields are written only by the
  motion integrator (and by the transition engine when it starts an arc).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import NamedTuple


class Compartment(Enum):
    """The two discrete states an entity can occupy."""

    A = "A"
    B = "B"

    @property
    def other(self) -> Compartment:
        return Compartment.B if self is Compartment.A else Compartment.A


class Point(NamedTuple):
    x: float
    y: float


class Arc(NamedTuple):
    """Four control points of a cubic Bezier path between compartments."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point


@dataclass
class Entity:
    """One simulated individual."""

    compartment: Compartment
    x: float
    y: float
    vx: float
    vy: float
    stagger_offset: int
    transitioning: bool = False
    transition_progress: float = 0.0
    arc: Arc | None = None


def random_velocity(speed: float, rng: Random) -> tuple[float, float]:
    """Velocity with each component uniform in ``[-speed/2, speed/2]``."""
    return (rng.random() - 0.5) * speed, (rng.random() - 0.5) * speed


def create_entity(
    compartment: Compartment,
    x: float,
    y: float,
    frames_per_batch: int,
    initial_speed: float,
    rng: Random,
) -> Entity:
    """Create an entity at rest-in-compartment with a random stagger offset."""
    vx, vy = random_velocity(initial_speed, rng)
    return Entity(
        compartment=compartment,
        x=x,
        y=y,
        vx=vx,
        vy=vy,
        stagger_offset=rng.randrange(frames_per_batch),
    )
