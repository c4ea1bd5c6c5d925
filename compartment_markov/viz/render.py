"""Matplotlib rendering for the two-compartment simulation.

The renderer is a read-only collaborator: it draws ``FrameSnapshot`` data
after each tick and ``DisplayState`` data when the session publishes it, and
never touches entity records.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from random import Random
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
from matplotlib import animation
from matplotlib.axes import Axes
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch, Rectangle

from compartment_markov.config.types import EngineConfig, SimulationParams
from compartment_markov.domain.layout import Layout
from compartment_markov.simulation.headless import DEFAULT_VIEWPORT
from compartment_markov.simulation.history import HistorySample
from compartment_markov.simulation.scheduler import (
    FrameCallback,
    FrameScheduler,
    ManualFrameScheduler,
    TimerFrameScheduler,
)
from compartment_markov.simulation.session import (
    CompartmentSession,
    DisplayState,
    FrameSnapshot,
    SessionState,
)
from compartment_markov.viz.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

LANE_HEIGHT = 54.0
"""Drawn height of each channel lane, in viewport units."""

CORNER_RADIUS = 16.0


# ---------------------------------------------------------------------------
# Static elements
# ---------------------------------------------------------------------------


def draw_compartments(
    ax: Axes, layout: Layout, params: SimulationParams, theme: Theme = DEFAULT_THEME
) -> dict[str, Any]:
    """Draw compartments and channel lanes on *ax*; returns the label artists.

    Axes use screen orientation: y grows downwards.
    """
    ax.set_xlim(0, layout.width)
    ax.set_ylim(layout.height, 0)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_facecolor(theme.background)
    for spine in ax.spines.values():
        spine.set_visible(False)

    for rect, fill, edge in (
        (layout.comp_a, theme.comp_a_fill, theme.comp_a_edge),
        (layout.comp_b, theme.comp_b_fill, theme.comp_b_edge),
    ):
        radius = min(CORNER_RADIUS, rect.w / 2, rect.h / 2)
        ax.add_patch(
            FancyBboxPatch(
                (rect.x, rect.y),
                rect.w,
                rect.h,
                boxstyle=f"round,pad=0,rounding_size={radius}",
                facecolor=fill,
                edgecolor=edge,
                linewidth=1.5,
            )
        )

    channel = layout.channel
    lane_h = min(LANE_HEIGHT, channel.lane_offset * 1.5)
    for lane_y, marker in (
        (channel.center_y - channel.lane_offset, ">"),
        (channel.center_y + channel.lane_offset, "<"),
    ):
        ax.add_patch(
            Rectangle(
                (channel.x, lane_y - lane_h / 2),
                channel.w,
                lane_h,
                facecolor=theme.channel_fill,
                edgecolor="none",
            )
        )
        ax.plot([channel.mid_x], [lane_y], marker=marker, color=theme.arrow, markersize=7)

    prob_ab = ax.text(
        channel.mid_x,
        channel.center_y - channel.lane_offset - lane_h / 2 - 4,
        "",
        ha="center",
        va="bottom",
        fontsize=8,
        family="monospace",
        color=theme.muted_text,
    )
    prob_ba = ax.text(
        channel.mid_x,
        channel.center_y + channel.lane_offset + lane_h / 2 + 4,
        "",
        ha="center",
        va="top",
        fontsize=8,
        family="monospace",
        color=theme.muted_text,
    )
    name_a = ax.text(
        layout.comp_a.x + layout.comp_a.w / 2,
        layout.comp_a.y - 6,
        "",
        ha="center",
        va="bottom",
        fontsize=10,
        weight="bold",
        family="monospace",
        color=theme.comp_a_label,
    )
    name_b = ax.text(
        layout.comp_b.x + layout.comp_b.w / 2,
        layout.comp_b.y - 6,
        "",
        ha="center",
        va="bottom",
        fontsize=10,
        weight="bold",
        family="monospace",
        color=theme.comp_b_label,
    )
    labels = {"prob_ab": prob_ab, "prob_ba": prob_ba, "name_a": name_a, "name_b": name_b}
    update_labels(labels, params, None)
    return labels


def update_labels(
    labels: dict[str, Any], params: SimulationParams, snapshot: FrameSnapshot | None
) -> None:
    """Refresh probability and name/count labels; counts only when a snapshot exists."""
    labels["prob_ab"].set_text(f"{params.prob_a_to_b_pct:.1f}%")
    labels["prob_ba"].set_text(f"{params.prob_b_to_a_pct:.1f}%")
    if snapshot is None or len(snapshot) == 0:
        labels["name_a"].set_text(params.name_a)
        labels["name_b"].set_text(params.name_b)
    else:
        labels["name_a"].set_text(f"{params.name_a}: {snapshot.count_a}")
        labels["name_b"].set_text(f"{params.name_b}: {snapshot.count_b}")


def particle_colors(snapshot: FrameSnapshot, theme: Theme = DEFAULT_THEME) -> np.ndarray:
    """(N, 4) RGBA array: compartment colour, overridden while in flight."""
    colors = np.empty((len(snapshot), 4), dtype=float)
    colors[:] = to_rgba(theme.particle_a)
    colors[snapshot.in_b] = to_rgba(theme.particle_b)
    colors[snapshot.transitioning] = to_rgba(theme.particle_transit)
    return colors


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------


def _history_arrays(history: Sequence[HistorySample]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    steps = np.fromiter((s.step for s in history), dtype=float, count=len(history))
    a = np.fromiter((s.count_a for s in history), dtype=float, count=len(history))
    b = np.fromiter((s.count_b for s in history), dtype=float, count=len(history))
    return steps, a, b


def _style_timeseries_axes(ax: Axes, total_population: int, theme: Theme) -> None:
    ax.set_xlabel("Step")
    ax.set_ylabel("Population")
    ax.set_ylim(0, max(total_population, 10))
    ax.set_facecolor(theme.background)
    ax.grid(True, alpha=0.3)


def _timeseries_xlim(history: Sequence[HistorySample], span: int) -> tuple[float, float]:
    if not history:
        return 0.0, float(max(span, 1))
    first = history[0].step
    last = history[-1].step
    return float(first), float(max(last, first + span))


def render_history_timeseries(
    history: Sequence[HistorySample],
    output_path: Path,
    name_a: str = "A",
    name_b: str = "B",
    total_population: int | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Static figure of the population history, one line per compartment."""
    if not history:
        raise ValueError("history must contain at least one sample")
    steps, a, b = _history_arrays(history)
    total = total_population if total_population is not None else int(a[0] + b[0])

    fig, ax = plt.subplots(figsize=(8, 3.5))
    ax.plot(steps, a, color=theme.series_a, linewidth=2, label=name_a)
    ax.plot(steps, b, color=theme.series_b, linewidth=2, label=name_b)
    _style_timeseries_axes(ax, total, theme)
    if len(steps) > 1:
        ax.set_xlim(steps[0], steps[-1])
    ax.legend(loc="upper right")
    ax.set_title("Population over time")
    fig.tight_layout()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


# ---------------------------------------------------------------------------
# Session figure (shared by the live viewer and animation export)
# ---------------------------------------------------------------------------


class SessionFigure:
    """World view plus time-series panel bound to one session."""

    def __init__(
        self,
        session: CompartmentSession,
        fig: Figure | None = None,
        theme: Theme = DEFAULT_THEME,
    ) -> None:
        self.session = session
        self.theme = theme
        self.fig = fig if fig is not None else plt.figure(figsize=(10, 6))
        self.fig.set_facecolor(theme.background)
        gs = self.fig.add_gridspec(3, 1, height_ratios=[2, 2, 1.4])
        self.ax_world = self.fig.add_subplot(gs[0:2, 0])
        self.ax_series = self.fig.add_subplot(gs[2, 0])
        self._labels: dict[str, Any] = {}
        self.scatter: Any = None
        self.line_a: Any = None
        self.line_b: Any = None
        self._status: Any = None
        self.redraw_static()
        self._unsubscribe = session.subscribe(self.update_display)

    def redraw_static(self) -> None:
        """Rebuild everything that depends on layout (after a resize)."""
        ax = self.ax_world
        ax.clear()
        layout = self.session.layout
        if layout is None:
            ax.set_axis_off()
            self._labels = {}
        else:
            self._labels = draw_compartments(ax, layout, self.session.params, self.theme)
        self.scatter = ax.scatter(
            np.empty(0), np.empty(0), s=self.theme.particle_size, linewidths=0, zorder=3
        )
        self._status = ax.text(
            0.01, 0.99, "", transform=ax.transAxes, ha="left", va="top",
            fontsize=9, color=self.theme.text,
        )

        series = self.ax_series
        series.clear()
        _style_timeseries_axes(series, self.session.params.total_population, self.theme)
        (self.line_a,) = series.plot([], [], color=self.theme.series_a, linewidth=2)
        (self.line_b,) = series.plot([], [], color=self.theme.series_b, linewidth=2)
        self.update_frame()
        self.update_display(self.session.display)

    def update_frame(self) -> None:
        snapshot = self.session.frame_snapshot()
        if len(snapshot):
            self.scatter.set_offsets(snapshot.positions)
            self.scatter.set_facecolors(particle_colors(snapshot, self.theme))
        else:
            self.scatter.set_offsets(np.empty((0, 2)))
        if self._labels:
            update_labels(self._labels, self.session.params, snapshot)

    def update_display(self, display: DisplayState) -> None:
        if self.line_a is None:
            return
        steps, a, b = _history_arrays(display.history)
        self.line_a.set_data(steps, a)
        self.line_b.set_data(steps, b)
        span = self.session.config.history_capacity * self.session.config.trials_per_batch
        self.ax_series.set_xlim(*_timeseries_xlim(display.history, span))
        if display.state is SessionState.STOPPED:
            self.ax_series.set_ylim(0, max(self.session.params.total_population, 10))
        status = display.state.value.capitalize()
        if display.step > 0:
            status += f" | Step {display.step}"
        status += f"   {display.name_a}: {display.count_a}  {display.name_b}: {display.count_b}"
        self._status.set_text(status)

    def close(self) -> None:
        self._unsubscribe()
        plt.close(self.fig)


class _RedrawingScheduler:
    """Wraps a scheduler so every tick is followed by a redraw."""

    def __init__(self, inner: FrameScheduler) -> None:
        self._inner = inner
        self.view: SessionFigure | None = None

    def request_frame(self, callback: FrameCallback) -> Any:
        def run() -> None:
            callback()
            if self.view is not None:
                self.view.update_frame()
                self.view.fig.canvas.draw_idle()

        return self._inner.request_frame(run)

    def cancel(self, handle: Any) -> None:
        self._inner.cancel(handle)


class LiveViewer:
    """Interactive matplotlib window driving a session from canvas timers.

    Keys: space starts or pauses, ``r`` resets.
    """

    def __init__(
        self,
        params: SimulationParams | None = None,
        config: EngineConfig | None = None,
        rng: Random | None = None,
        theme: Theme = DEFAULT_THEME,
        interval_ms: int = 16,
        viewport: tuple[float, float] = DEFAULT_VIEWPORT,
    ) -> None:
        fig = plt.figure(figsize=(10, 6))
        self._scheduler = _RedrawingScheduler(TimerFrameScheduler(fig.canvas, interval_ms))
        self.session = CompartmentSession(self._scheduler, params=params, config=config, rng=rng)
        self.session.resize(*viewport)
        self.view = SessionFigure(self.session, fig=fig, theme=theme)
        self._scheduler.view = self.view
        fig.canvas.mpl_connect("key_press_event", self._on_key)
        fig.canvas.mpl_connect("close_event", self._on_close)
        fig.canvas.mpl_connect("resize_event", self._on_resize)

    def _on_resize(self, _event: Any) -> None:
        bbox = self.view.ax_world.get_window_extent()
        self.session.resize(bbox.width, bbox.height)
        self.view.redraw_static()
        self.view.fig.canvas.draw_idle()

    def _on_key(self, event: Any) -> None:
        if event.key == " ":
            if self.session.state is SessionState.RUNNING:
                self.session.pause()
            else:
                self.session.start()
        elif event.key == "r":
            self.session.reset()
            self.view.update_frame()
        self.view.fig.canvas.draw_idle()

    def _on_close(self, _event: Any) -> None:
        self.session.teardown()

    def show(self, autostart: bool = True) -> None:
        if autostart:
            self.session.start()
        plt.show()


def save_animation(
    output_path: Path,
    frames: int,
    params: SimulationParams | None = None,
    config: EngineConfig | None = None,
    rng: Random | None = None,
    theme: Theme = DEFAULT_THEME,
    fps: int = 30,
    viewport: tuple[float, float] = DEFAULT_VIEWPORT,
) -> Path:
    """Run a fresh session for *frames* frames and save it as an animation.

    ``.gif`` uses Pillow; any other suffix uses FFmpeg.
    """
    if frames < 1:
        raise ValueError("frames must be >= 1")
    if fps < 1:
        raise ValueError("fps must be >= 1")
    scheduler = ManualFrameScheduler()
    session = CompartmentSession(scheduler, params=params, config=config, rng=rng)
    if session.resize(*viewport) is None:
        raise ValueError(f"viewport {viewport[0]}x{viewport[1]} is too small for a layout")
    view = SessionFigure(session, theme=theme)
    session.start()

    def update(_frame_index: int) -> tuple[Any, ...]:
        scheduler.run_frame()
        view.update_frame()
        return (view.scatter, view.line_a, view.line_b)

    anim = animation.FuncAnimation(
        view.fig, update, frames=frames, interval=max(1, int(1000 / fps)), blit=False
    )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    writer: animation.PillowWriter | animation.FFMpegWriter
    if output_path.suffix.lower() == ".gif":
        writer = animation.PillowWriter(fps=fps)
    else:
        writer = animation.FFMpegWriter(fps=fps)
    anim.save(output_path, writer=writer)
    session.teardown()
    view.close()
    logger.info("saved %d-frame animation to %s", frames, output_path)
    return output_path
