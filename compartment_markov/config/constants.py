"""Centralized domain constants for the two-compartment simulation.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

DEFAULT_POPULATION_A = 50
"""Default starting population of compartment A."""

DEFAULT_POPULATION_B = 50
"""Default starting population of compartment B."""

MAX_POPULATION = 2_000
"""Upper bound applied to each starting population."""

DEFAULT_PROB_PCT = 5.0
"""Default per-trial transition probability, in percent."""

MAX_NAME_LENGTH = 8
"""Compartment display names are truncated to this many characters."""

FRAMES_PER_BATCH = 10
"""Frames between two discrete batches of the same entity."""

TRIALS_PER_BATCH = 8
"""Bernoulli trials evaluated per entity per batch."""

HISTORY_CAPACITY = 200
"""Maximum number of (step, count_a, count_b) samples kept in the history."""

TRANSITION_SPEED = 0.04
"""Arc progress added per frame while an entity is in flight."""

ENTITY_RADIUS = 3.0
"""Drawn radius of an entity; used for wall contact."""

MAX_SPEED = 4.0
"""Speed cap for the in-compartment random walk."""

INITIAL_SPEED = 4.0
"""Width of the uniform range each velocity component is drawn from at creation."""

ARRIVAL_SPEED = 3.0
"""Width of the uniform range each velocity component is drawn from on arrival."""

JITTER = 0.5
"""Width of the uniform Brownian kick added to each velocity component per frame."""

SPAWN_INSET = 10.0
"""Margin kept from the compartment border when placing new entities."""

DESTINATION_INSET = 20.0
"""Margin kept from the compartment border when choosing an arc endpoint."""

ARC_JITTER = 20.0
"""Vertical spread of the arc midpoint inside the channel lane."""

LAYOUT_MARGIN = 20.0
"""Outer margin of the compartment layout, in pixels."""

LAYOUT_TOP_LABEL = 25.0
"""Extra space above the compartments reserved for name/count labels."""

LAYOUT_BOTTOM_PAD = 30.0
"""Height trimmed from the compartments beyond the two margins."""

CHANNEL_WIDTH_FRACTION = 1 / 7
"""Fraction of the viewport width used by the connecting channel."""

LANE_OFFSET = 60.0
"""Vertical distance of each lane from the channel centre line."""
