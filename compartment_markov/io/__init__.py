"""Artifact I/O: Parquet schema, history export, output paths."""

from compartment_markov.io.paths import (
    history_path,
    resolve_within_base,
    summary_path,
    timeseries_figure_path,
)
from compartment_markov.io.persistence import read_history_parquet, write_history_parquet
from compartment_markov.io.schemas import HISTORY_SCHEMA, HISTORY_SCHEMA_VERSION

__all__ = [
    "HISTORY_SCHEMA",
    "HISTORY_SCHEMA_VERSION",
    "history_path",
    "read_history_parquet",
    "resolve_within_base",
    "summary_path",
    "timeseries_figure_path",
    "write_history_parquet",
]
