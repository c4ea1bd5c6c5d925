"""Tests for cli.py: argument parsing, config resolution, subcommand dispatch."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import patch

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from compartment_markov.cli import _coerce_int, main  # noqa: E402
from compartment_markov.io.persistence import read_history_parquet  # noqa: E402


def _run_argv(tmp_path: Path, *extra: str) -> list[str]:
    return [
        "compartment-markov",
        "run",
        "--frames",
        "40",
        "--seed",
        "3",
        "--population-a",
        "30",
        "--population-b",
        "10",
        "--out-dir",
        "out",
        "--base-dir",
        str(tmp_path),
        *extra,
    ]


def test_main_no_subcommand_exits() -> None:
    with patch.object(sys, "argv", ["compartment-markov"]):
        with pytest.raises(SystemExit):
            main()


def test_run_writes_artifacts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch.object(sys, "argv", _run_argv(tmp_path)):
        main()
    out_dir = tmp_path / "out"
    assert (out_dir / "history.parquet").exists()
    assert (out_dir / "population_timeseries.png").exists()

    summary = json.loads((out_dir / "summary.json").read_text())
    assert summary["frames"] == 40
    assert summary["count_a"] + summary["count_b"] == 40
    assert summary == json.loads(capsys.readouterr().out)

    samples, metadata = read_history_parquet(out_dir / "history.parquet")
    assert len(samples) == summary["history_samples"] == 5
    assert metadata["population_a"] == 30


def test_run_is_reproducible_with_seed(tmp_path: Path) -> None:
    with patch.object(sys, "argv", _run_argv(tmp_path / "a")):
        main()
    with patch.object(sys, "argv", _run_argv(tmp_path / "b")):
        main()
    first, _ = read_history_parquet(tmp_path / "a" / "out" / "history.parquet")
    second, _ = read_history_parquet(tmp_path / "b" / "out" / "history.parquet")
    assert first == second


def test_config_file_values_and_cli_override(tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"population_a": 7, "population_b": 2, "name_a": "Cyto", "frames": 20})
    )
    argv = [
        "compartment-markov",
        "run",
        "--config",
        str(config),
        "--population-b",
        "4",
        "--out-dir",
        "cfg",
        "--base-dir",
        str(tmp_path),
    ]
    with patch.object(sys, "argv", argv):
        main()
    summary = json.loads((tmp_path / "cfg" / "summary.json").read_text())
    assert summary["frames"] == 20
    assert summary["name_a"] == "Cyto"
    assert summary["count_a"] + summary["count_b"] == 11


def test_missing_config_file_exits(tmp_path: Path) -> None:
    argv = ["compartment-markov", "run", "--config", str(tmp_path / "nope.json")]
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit):
            main()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_invalid_config_file_exits(tmp_path: Path, content: str) -> None:
    config = tmp_path / "bad.json"
    config.write_text(content)
    argv = ["compartment-markov", "run", "--config", str(config)]
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit):
            main()


def test_out_dir_escape_exits(tmp_path: Path) -> None:
    argv = [
        "compartment-markov",
        "run",
        "--out-dir",
        "../escape",
        "--base-dir",
        str(tmp_path),
    ]
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit):
            main()


def test_invalid_engine_setting_exits(tmp_path: Path) -> None:
    argv = _run_argv(tmp_path, "--frames-per-batch", "0")
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit):
            main()


def test_view_dispatches() -> None:
    argv = ["compartment-markov", "view", "--no-autostart", "--prob-ab", "20", "--theme", "dark"]
    with patch.object(sys, "argv", argv):
        with patch("compartment_markov.cli.LiveViewer") as mock_viewer:
            main()
    mock_viewer.assert_called_once()
    kwargs = mock_viewer.call_args.kwargs
    assert kwargs["params"].prob_a_to_b_pct == 20.0
    assert kwargs["interval_ms"] == 16
    mock_viewer.return_value.show.assert_called_once_with(autostart=False)


def test_animate_dispatches(tmp_path: Path) -> None:
    argv = [
        "compartment-markov",
        "animate",
        "--output",
        "movie.gif",
        "--frames",
        "12",
        "--fps",
        "6",
        "--base-dir",
        str(tmp_path),
    ]
    with patch.object(sys, "argv", argv):
        with patch("compartment_markov.cli.save_animation") as mock_save:
            main()
    mock_save.assert_called_once()
    assert mock_save.call_args.args[0] == (tmp_path / "movie.gif").resolve()
    assert mock_save.call_args.args[1] == 12
    assert mock_save.call_args.kwargs["fps"] == 6


class TestCoercion:
    def test_rejects_bool(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            _coerce_int(True, "frames")

    def test_rejects_fractional_float(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            _coerce_int(2.5, "frames")

    def test_accepts_integral_float(self) -> None:
        assert _coerce_int(4.0, "frames") == 4
