"""Parquet export of a session's population history.

The export is a one-way analysis artifact: it carries counts and the
parameters that produced them, never the entity state, and is not loaded back
into a session.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from compartment_markov.config.types import SimulationParams
from compartment_markov.io.schemas import HISTORY_SCHEMA, HISTORY_SCHEMA_VERSION
from compartment_markov.simulation.history import HistorySample

_METADATA_KEY = b"compartment_markov"


def write_history_parquet(
    history: Iterable[HistorySample],
    path: Path,
    params: SimulationParams | None = None,
) -> Path:
    """Write history samples to *path*, creating parent directories."""
    columns: dict[str, list[int]] = {"step": [], "count_a": [], "count_b": []}
    for sample in history:
        columns["step"].append(sample.step)
        columns["count_a"].append(sample.count_a)
        columns["count_b"].append(sample.count_b)

    metadata: dict[str, object] = {"schema_version": HISTORY_SCHEMA_VERSION}
    if params is not None:
        metadata.update(
            {
                "name_a": params.name_a,
                "name_b": params.name_b,
                "population_a": params.population_a,
                "population_b": params.population_b,
                "prob_a_to_b_pct": params.prob_a_to_b_pct,
                "prob_b_to_a_pct": params.prob_b_to_a_pct,
            }
        )
    schema = HISTORY_SCHEMA.with_metadata({_METADATA_KEY: json.dumps(metadata).encode()})
    table = pa.Table.from_pydict(columns, schema=schema)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table, path)
    return path


def read_history_parquet(path: Path) -> tuple[list[HistorySample], dict[str, object]]:
    """Read an exported history back as samples plus its run metadata."""
    table = pq.read_table(Path(path))
    raw = (table.schema.metadata or {}).get(_METADATA_KEY)
    metadata: dict[str, object] = json.loads(raw) if raw else {}
    samples = [
        HistorySample(step=int(row["step"]), count_a=int(row["count_a"]), count_b=int(row["count_b"]))
        for row in table.to_pylist()
    ]
    return samples, metadata
