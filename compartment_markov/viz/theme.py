"""Visualization theme presets for the compartment renderers.

Themes are frozen dataclasses that group all styling constants together, so
the renderers take a ``Theme`` instead of referencing module-level colours.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    background: str = "#ffffff"
    text: str = "#333333"
    muted_text: str = "#666666"
    arrow: str = "#888888"

    comp_a_fill: str = "#ff638214"
    comp_a_edge: str = "#b91c1c"
    comp_a_label: str = "#dc2626"
    comp_b_fill: str = "#36a2eb14"
    comp_b_edge: str = "#1d4ed8"
    comp_b_label: str = "#2563eb"
    channel_fill: str = "#9ca3af26"

    particle_a: str = "#dc262680"
    particle_b: str = "#2563eb80"
    particle_transit: str = "#b48200b3"
    particle_size: float = 9.0

    series_a: str = "#dc2626cc"
    series_b: str = "#2563ebcc"


LIGHT_THEME = Theme()

DARK_THEME = Theme(
    background="#111827",
    text="#e5e7eb",
    muted_text="#9ca3af",
    arrow="#6b7280",
    comp_a_fill="#ef44441f",
    comp_a_edge="#ef4444",
    comp_a_label="#f87171",
    comp_b_fill="#3b82f61f",
    comp_b_edge="#3b82f6",
    comp_b_label="#60a5fa",
    channel_fill="#6b728040",
    particle_a="#f87171b3",
    particle_b="#60a5fab3",
    particle_transit="#facc15cc",
    series_a="#f87171",
    series_b="#60a5fa",
)

REGISTERED_THEMES: dict[str, Theme] = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}

DEFAULT_THEME = LIGHT_THEME


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]
