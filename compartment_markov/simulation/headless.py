"""Drive a session without a display, e.g. from the CLI or a notebook."""

from __future__ import annotations

import logging
from random import Random

from compartment_markov.config.types import EngineConfig, SimulationParams
from compartment_markov.simulation.scheduler import ManualFrameScheduler
from compartment_markov.simulation.session import CompartmentSession

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = (700.0, 400.0)
"""Viewport used when no size is given; matches the live viewer's canvas."""


def run_headless(
    frames: int,
    params: SimulationParams | None = None,
    config: EngineConfig | None = None,
    rng: Random | None = None,
    viewport: tuple[float, float] = DEFAULT_VIEWPORT,
) -> CompartmentSession:
    """Start a fresh session and advance it ``frames`` frames.

    The returned session is left PAUSED so callers can inspect or resume it.
    """
    if frames < 0:
        raise ValueError("frames must be >= 0")
    scheduler = ManualFrameScheduler()
    session = CompartmentSession(scheduler, params=params, config=config, rng=rng)
    if session.resize(*viewport) is None:
        raise ValueError(f"viewport {viewport[0]}x{viewport[1]} is too small for a layout")
    session.start()
    ran = scheduler.run_frames(frames)
    session.pause()
    logger.info("headless run finished after %d frames (step %d)", ran, session.step)
    return session
