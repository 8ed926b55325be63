"""Parquet schema definitions for simulation artifacts.

Every module that writes or reads time series, sweep, or benchmark tables
works against the column contracts defined here.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

TIMESERIES_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("tick", pa.int64()),
        ("susceptible", pa.int64()),
        ("infected", pa.int64()),
        ("recovered", pa.int64()),
        ("dead", pa.int64()),
    ]
)

COMPARTMENT_COLUMNS = ["susceptible", "infected", "recovered", "dead"]

# ---------------------------------------------------------------------------
# Sweep & benchmark
# ---------------------------------------------------------------------------

SWEEP_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("parameter", pa.string()),
        ("value", pa.float64()),
        ("run", pa.int64()),
        ("seed", pa.int64()),
        ("ticks_run", pa.int64()),
        ("extinct", pa.bool_()),
        ("fraction_infected", pa.float64()),
        ("dead", pa.int64()),
    ]
)

BENCHMARK_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("run", pa.int64()),
        ("seed", pa.int64()),
        ("ticks_run", pa.int64()),
        ("extinct", pa.bool_()),
        ("elapsed_seconds", pa.float64()),
    ]
)
