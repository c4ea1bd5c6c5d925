"""Discrete Markov transitions: Bernoulli trials evaluated in batches.

Only the net result of a batch is observable. An entity that flips A -> B -> A
inside one batch ends where it started and gets no visual transition.
"""

from __future__ import annotations

import logging
from random import Random

from compartment_markov.config.constants import ARC_JITTER, DESTINATION_INSET
from compartment_markov.domain.entity import Arc, Compartment, Entity, Point
from compartment_markov.domain.layout import Layout

logger = logging.getLogger(__name__)


def _clamp_unit(p: float) -> float:
    return min(max(p, 0.0), 1.0)


def run_trials(
    compartment: Compartment,
    p_a_to_b: float,
    p_b_to_a: float,
    trials: int,
    rng: Random,
) -> Compartment:
    """Run ``trials`` independent Bernoulli trials and return the final state."""
    p_a_to_b = _clamp_unit(p_a_to_b)
    p_b_to_a = _clamp_unit(p_b_to_a)
    state = compartment
    for _ in range(trials):
        if state is Compartment.A:
            if rng.random() < p_a_to_b:
                state = Compartment.B
        elif rng.random() < p_b_to_a:
            state = Compartment.A
    return state


def build_arc(
    x: float,
    y: float,
    source: Compartment,
    layout: Layout,
    rng: Random,
    destination_inset: float = DESTINATION_INSET,
    arc_jitter: float = ARC_JITTER,
) -> Arc:
    """Path from (x, y) through the source-side lane to a point in the other compartment."""
    channel = layout.channel
    lane_y = channel.lane_y(source)
    if source is Compartment.A:
        entrance_x = layout.comp_a.right
    else:
        entrance_x = layout.comp_b.x
    mid = Point(channel.mid_x, lane_y + (rng.random() - 0.5) * arc_jitter)
    end = Point(*layout.bounds_for(source.other).random_point(destination_inset, rng))
    return Arc(Point(x, y), Point(entrance_x, lane_y), mid, end)


def begin_transition(
    entity: Entity,
    source: Compartment,
    layout: Layout,
    rng: Random,
    destination_inset: float = DESTINATION_INSET,
    arc_jitter: float = ARC_JITTER,
) -> None:
    """Put ``entity`` in flight from its current position out of ``source``."""
    entity.arc = build_arc(
        entity.x,
        entity.y,
        source,
        layout,
        rng,
        destination_inset=destination_inset,
        arc_jitter=arc_jitter,
    )
    entity.transitioning = True
    entity.transition_progress = 0.0


def advance_discrete(
    entity: Entity,
    p_a_to_b: float,
    p_b_to_a: float,
    trials_per_batch: int,
    layout: Layout,
    rng: Random,
    destination_inset: float = DESTINATION_INSET,
    arc_jitter: float = ARC_JITTER,
) -> bool:
    """Run one batch for ``entity``; start an arc if its compartment changed.

    Entities already in flight take part as well. A net change mid-flight
    restarts the arc from the current on-screen position.
    Returns ``True`` when the batch produced a net change.
    """
    start = entity.compartment
    final = run_trials(start, p_a_to_b, p_b_to_a, trials_per_batch, rng)
    if final is start:
        return False
    entity.compartment = final
    begin_transition(
        entity,
        start,
        layout,
        rng,
        destination_inset=destination_inset,
        arc_jitter=arc_jitter,
    )
    return True
