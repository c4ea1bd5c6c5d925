"""Domain layer: entity records and viewport layout."""

from compartment_markov.domain.entity import (
    Arc,
    Compartment,
    Entity,
    Point,
    create_entity,
    random_velocity,
)
from compartment_markov.domain.layout import Channel, Layout, Rect, compute_layout

__all__ = [
    "Arc",
    "Channel",
    "Compartment",
    "Entity",
    "Layout",
    "Point",
    "Rect",
    "compute_layout",
    "create_entity",
    "random_velocity",
]
