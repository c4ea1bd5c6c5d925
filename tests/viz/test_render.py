"""Tests for compartment_markov.viz (Agg backend)."""

from __future__ import annotations

from pathlib import Path
from random import Random
from types import SimpleNamespace

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402
from matplotlib.colors import to_rgba  # noqa: E402

from compartment_markov.config.types import EngineConfig, SimulationParams  # noqa: E402
from compartment_markov.domain.layout import compute_layout  # noqa: E402
from compartment_markov.simulation.history import HistorySample  # noqa: E402
from compartment_markov.simulation.scheduler import ManualFrameScheduler  # noqa: E402
from compartment_markov.simulation.session import (  # noqa: E402
    CompartmentSession,
    FrameSnapshot,
    SessionState,
)
from compartment_markov.viz.render import (  # noqa: E402
    LiveViewer,
    SessionFigure,
    draw_compartments,
    particle_colors,
    render_history_timeseries,
    save_animation,
    update_labels,
)
from compartment_markov.viz.theme import DARK_THEME, LIGHT_THEME, get_theme  # noqa: E402


def _snapshot() -> FrameSnapshot:
    return FrameSnapshot(
        frame=3,
        positions=np.zeros((3, 2)),
        in_b=np.array([False, True, True]),
        transitioning=np.array([False, False, True]),
        count_a=1,
        count_b=2,
    )


class TestTheme:
    def test_lookup_is_case_insensitive(self) -> None:
        assert get_theme("DARK") is DARK_THEME
        assert get_theme("light") is LIGHT_THEME

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="Unknown theme"):
            get_theme("neon")


class TestStaticElements:
    def test_particle_colors(self) -> None:
        colors = particle_colors(_snapshot(), LIGHT_THEME)
        assert colors.shape == (3, 4)
        assert tuple(colors[0]) == pytest.approx(to_rgba(LIGHT_THEME.particle_a))
        assert tuple(colors[1]) == pytest.approx(to_rgba(LIGHT_THEME.particle_b))
        assert tuple(colors[2]) == pytest.approx(to_rgba(LIGHT_THEME.particle_transit))

    def test_labels(self) -> None:
        layout = compute_layout(700, 400)
        assert layout is not None
        fig, ax = plt.subplots()
        params = SimulationParams(prob_a_to_b_pct=12.34, prob_b_to_a_pct=5, name_a="Cyto")
        labels = draw_compartments(ax, layout, params)
        assert labels["prob_ab"].get_text() == "12.3%"
        assert labels["prob_ba"].get_text() == "5.0%"
        assert labels["name_a"].get_text() == "Cyto"

        update_labels(labels, params, _snapshot())
        assert labels["name_a"].get_text() == "Cyto: 1"
        assert labels["name_b"].get_text() == "B: 2"
        plt.close(fig)


class TestTimeseries:
    def test_writes_png(self, tmp_path: Path) -> None:
        history = [HistorySample(step=8 * i, count_a=50 - i, count_b=50 + i) for i in range(10)]
        out = render_history_timeseries(history, tmp_path / "fig" / "series.png", total_population=100)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_empty_history_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="at least one sample"):
            render_history_timeseries([], tmp_path / "series.png")


class TestSessionFigure:
    def test_tracks_session(self) -> None:
        scheduler = ManualFrameScheduler()
        session = CompartmentSession(
            scheduler,
            params=SimulationParams(population_a=15, population_b=5),
            config=EngineConfig(frames_per_batch=2),
            rng=Random(0),
        )
        session.resize(700, 400)
        view = SessionFigure(session)
        session.start()
        scheduler.run_frames(6)
        view.update_frame()
        assert len(view.scatter.get_offsets()) == 20
        xdata = view.line_a.get_xdata()
        assert len(xdata) == len(session.history)
        view.close()

    def test_without_layout(self) -> None:
        session = CompartmentSession(ManualFrameScheduler(), rng=Random(0))
        view = SessionFigure(session)
        assert len(view.scatter.get_offsets()) == 0
        view.close()


class TestLiveViewer:
    def test_keys_drive_lifecycle(self) -> None:
        viewer = LiveViewer(params=SimulationParams(population_a=5, population_b=5), rng=Random(0))
        session = viewer.session
        assert session.state is SessionState.STOPPED

        viewer._on_key(SimpleNamespace(key=" "))
        assert session.state is SessionState.RUNNING
        assert session.entity_count == 10
        viewer._on_key(SimpleNamespace(key=" "))
        assert session.state is SessionState.PAUSED
        viewer._on_key(SimpleNamespace(key=" "))
        assert session.state is SessionState.RUNNING
        viewer._on_key(SimpleNamespace(key="r"))
        assert session.state is SessionState.STOPPED
        assert session.entity_count == 0

        viewer._on_key(SimpleNamespace(key=" "))
        viewer._on_close(None)
        assert session.state is SessionState.STOPPED
        assert not session.has_pending_frame
        plt.close(viewer.view.fig)


class TestSaveAnimation:
    def test_writes_gif(self, tmp_path: Path) -> None:
        out = save_animation(
            tmp_path / "run.gif",
            frames=3,
            params=SimulationParams(population_a=5, population_b=5),
            rng=Random(0),
            fps=5,
        )
        assert out.exists()
        assert out.stat().st_size > 0

    def test_invalid_frames(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="frames"):
            save_animation(tmp_path / "run.gif", frames=0)
