"""Path helpers for exported run artifacts."""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def history_path(out_dir: Path) -> Path:
    """Return path to the history Parquet file within an output directory."""
    return out_dir / "history.parquet"


def timeseries_figure_path(out_dir: Path) -> Path:
    """Return path to the population time-series figure."""
    return out_dir / "population_timeseries.png"


def summary_path(out_dir: Path) -> Path:
    """Return path to the JSON run summary."""
    return out_dir / "summary.json"
