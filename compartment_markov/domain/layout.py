"""Viewport geometry: two compartment rectangles joined by a channel.

The channel carries two lanes: the upper lane is used by A -> B traffic and
the lower lane by B -> A traffic.
"""

from __future__ import annotations

from dataclasses import dataclass
from random import Random

from compartment_markov.config.constants import (
    CHANNEL_WIDTH_FRACTION,
    LANE_OFFSET,
    LAYOUT_BOTTOM_PAD,
    LAYOUT_MARGIN,
    LAYOUT_TOP_LABEL,
)
from compartment_markov.domain.entity import Compartment


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with its origin at the top-left corner."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def random_point(self, inset: float, rng: Random) -> tuple[float, float]:
        """Uniform point inside the rectangle, at least ``inset`` from each edge.

        The inset is shrunk per axis when the rectangle is too small to honour it.
        """
        ix = min(inset, self.w / 2)
        iy = min(inset, self.h / 2)
        px = self.x + ix + rng.random() * (self.w - 2 * ix)
        py = self.y + iy + rng.random() * (self.h - 2 * iy)
        return px, py


@dataclass(frozen=True)
class Channel:
    """Connecting region between the compartments."""

    x: float
    w: float
    center_y: float
    lane_offset: float

    @property
    def mid_x(self) -> float:
        return self.x + self.w / 2

    def lane_y(self, source: Compartment) -> float:
        """Vertical position of the lane used when leaving ``source``."""
        if source is Compartment.A:
            return self.center_y - self.lane_offset
        return self.center_y + self.lane_offset


@dataclass(frozen=True)
class Layout:
    """Result of one layout pass for a given viewport size."""

    width: float
    height: float
    comp_a: Rect
    comp_b: Rect
    channel: Channel

    def bounds_for(self, compartment: Compartment) -> Rect:
        return self.comp_a if compartment is Compartment.A else self.comp_b


def compute_layout(width: float, height: float) -> Layout | None:
    """Map viewport dimensions to compartment and channel geometry.

    Returns ``None`` when the viewport is too small to hold two non-empty
    compartments; callers treat that as "no surface yet".
    """
    if width <= 0 or height <= 0:
        return None
    channel_w = width * CHANNEL_WIDTH_FRACTION
    comp_w = (width - channel_w - LAYOUT_MARGIN * 2) / 2
    comp_h = height - LAYOUT_MARGIN * 2 - LAYOUT_BOTTOM_PAD
    if comp_w <= 0 or comp_h <= 0:
        return None
    top = LAYOUT_MARGIN + LAYOUT_TOP_LABEL

    comp_a = Rect(x=LAYOUT_MARGIN, y=top, w=comp_w, h=comp_h)
    comp_b = Rect(x=width - LAYOUT_MARGIN - comp_w, y=top, w=comp_w, h=comp_h)
    # Keep both lanes inside the compartment band on short viewports.
    lane_offset = min(LANE_OFFSET, comp_h / 4)
    channel = Channel(
        x=comp_a.right,
        w=channel_w,
        center_y=top + comp_h / 2,
        lane_offset=lane_offset,
    )
    return Layout(width=width, height=height, comp_a=comp_a, comp_b=comp_b, channel=channel)
