"""Parquet schema for exported population histories."""

from __future__ import annotations

import pyarrow as pa

HISTORY_SCHEMA_VERSION = 1

HISTORY_SCHEMA = pa.schema(
    [
        ("step", pa.int64()),
        ("count_a", pa.int64()),
        ("count_b", pa.int64()),
    ]
)
