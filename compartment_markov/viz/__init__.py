"""Visualization: themes and matplotlib renderers."""

from compartment_markov.viz.render import (
    LiveViewer,
    SessionFigure,
    draw_compartments,
    particle_colors,
    render_history_timeseries,
    save_animation,
)
from compartment_markov.viz.theme import (
    DARK_THEME,
    DEFAULT_THEME,
    LIGHT_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DARK_THEME",
    "DEFAULT_THEME",
    "LIGHT_THEME",
    "LiveViewer",
    "REGISTERED_THEMES",
    "SessionFigure",
    "Theme",
    "draw_compartments",
    "get_theme",
    "particle_colors",
    "render_history_timeseries",
    "save_animation",
]
