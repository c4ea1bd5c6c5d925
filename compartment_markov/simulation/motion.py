"""Cosmetic motion: random walk inside a compartment, Bezier flight between them.

Nothing here reads or writes ``Entity.compartment``.
"""

from __future__ import annotations

import math
from random import Random

from compartment_markov.config.types import EngineConfig
from compartment_markov.domain.entity import Entity, random_velocity
from compartment_markov.domain.layout import Rect

_DEFAULT_CONFIG = EngineConfig()


def cubic_bezier(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    """One coordinate of a cubic Bezier curve at parameter ``t``."""
    u = 1.0 - t
    return u * u * u * p0 + 3 * t * u * u * p1 + 3 * t * t * u * p2 + t * t * t * p3


def _advance_arc(entity: Entity, transition_speed: float, arrival_speed: float, rng: Random) -> None:
    arc = entity.arc
    if arc is None:
        # In-flight flag without a path: land where we are.
        entity.transitioning = False
        entity.transition_progress = 0.0
        return
    entity.transition_progress += transition_speed
    if entity.transition_progress >= 1.0:
        entity.transition_progress = 1.0
        entity.x, entity.y = arc.p3
        entity.transitioning = False
        entity.arc = None
        entity.vx, entity.vy = random_velocity(arrival_speed, rng)
        return
    t = entity.transition_progress
    entity.x = cubic_bezier(t, arc.p0.x, arc.p1.x, arc.p2.x, arc.p3.x)
    entity.y = cubic_bezier(t, arc.p0.y, arc.p1.y, arc.p2.y, arc.p3.y)


def _bounce(entity: Entity, bounds: Rect, radius: float) -> None:
    if entity.x - radius < bounds.x:
        entity.x = bounds.x + radius
        entity.vx = abs(entity.vx)
    if entity.x + radius > bounds.right:
        entity.x = bounds.right - radius
        entity.vx = -abs(entity.vx)
    if entity.y - radius < bounds.y:
        entity.y = bounds.y + radius
        entity.vy = abs(entity.vy)
    if entity.y + radius > bounds.bottom:
        entity.y = bounds.bottom - radius
        entity.vy = -abs(entity.vy)


def advance_visual(
    entity: Entity,
    bounds: Rect | None,
    transition_speed: float,
    rng: Random,
    config: EngineConfig = _DEFAULT_CONFIG,
) -> None:
    """Advance one frame of on-screen motion for ``entity``."""
    if entity.transitioning:
        _advance_arc(entity, transition_speed, config.arrival_speed, rng)
        return
    if bounds is None:
        return

    entity.x += entity.vx
    entity.y += entity.vy
    _bounce(entity, bounds, config.entity_radius)

    # Brownian kick
    entity.vx += (rng.random() - 0.5) * config.jitter
    entity.vy += (rng.random() - 0.5) * config.jitter

    speed = math.hypot(entity.vx, entity.vy)
    if speed > config.max_speed:
        entity.vx = entity.vx / speed * config.max_speed
        entity.vy = entity.vy / speed * config.max_speed
