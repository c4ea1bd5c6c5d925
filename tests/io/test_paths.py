from __future__ import annotations

from pathlib import Path

import pytest

from compartment_markov.io.paths import (
    history_path,
    resolve_within_base,
    summary_path,
    timeseries_figure_path,
)


def test_resolve_relative_path(tmp_path: Path) -> None:
    assert resolve_within_base(Path("out"), tmp_path) == (tmp_path / "out").resolve()


def test_resolve_base_itself(tmp_path: Path) -> None:
    assert resolve_within_base(Path("."), tmp_path) == tmp_path.resolve()


def test_resolve_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="escapes base_dir"):
        resolve_within_base(Path("../elsewhere"), tmp_path)


def test_resolve_rejects_absolute_outside(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="escapes base_dir"):
        resolve_within_base(tmp_path.parent / "sibling", tmp_path)


def test_artifact_names(tmp_path: Path) -> None:
    assert history_path(tmp_path).name == "history.parquet"
    assert timeseries_figure_path(tmp_path).name == "population_timeseries.png"
    assert summary_path(tmp_path).name == "summary.json"
