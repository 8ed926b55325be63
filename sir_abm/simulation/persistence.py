"""Parquet and JSON persistence for simulation outputs.

Only outputs are written (time series, run metadata); agent and grid state
never leave the engine.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from sir_abm.config.constants import TIMESERIES_SCHEMA_VERSION
from sir_abm.config.types import SimulationConfig
from sir_abm.io.schemas import TIMESERIES_SCHEMA
from sir_abm.simulation.records import RunSummary, TickSummary, TimeSeries


def timeseries_table(series: TimeSeries, run_id: str) -> pa.Table:
    columns: dict[str, list[int | str]] = {"run_id": [run_id] * len(series)}
    columns.update(series.to_columns())
    return pa.Table.from_pydict(columns, schema=TIMESERIES_SCHEMA)


def write_timeseries(series: TimeSeries, path: Path, run_id: str) -> Path:
    """Write one run's series to *path*, replacing any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(timeseries_table(series, run_id), path)
    return path


def write_timeseries_batch(runs: Iterable[tuple[str, TimeSeries]], path: Path) -> Path:
    """Stream several runs into one Parquet file, one row group per run."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    writer: pq.ParquetWriter | None = None
    try:
        for run_id, series in runs:
            if writer is None:
                writer = pq.ParquetWriter(path, TIMESERIES_SCHEMA)
            writer.write_table(timeseries_table(series, run_id))
        if writer is None:
            pq.write_table(TIMESERIES_SCHEMA.empty_table(), path)
    finally:
        if writer is not None:
            writer.close()
    return path


def read_timeseries(path: Path, run_id: str | None = None) -> TimeSeries:
    """Load a series back from Parquet.

    *run_id* may be omitted when the file holds exactly one run.
    """
    if run_id is None:
        table = pq.read_table(path)
        run_ids = set(table.column("run_id").to_pylist())
        if len(run_ids) > 1:
            raise ValueError(f"{path} holds {len(run_ids)} runs; pass run_id")
    else:
        table = pq.read_table(path, filters=[("run_id", "=", run_id)])
        if table.num_rows == 0:
            raise ValueError(f"run_id {run_id!r} not found in {path}")
    rows = sorted(table.to_pylist(), key=lambda row: int(row["tick"]))
    return TimeSeries(
        TickSummary(
            tick=int(row["tick"]),
            susceptible=int(row["susceptible"]),
            infected=int(row["infected"]),
            recovered=int(row["recovered"]),
            dead=int(row["dead"]),
        )
        for row in rows
    )


def write_run_payload(path: Path, config: SimulationConfig, summary: RunSummary) -> Path:
    """Write JSON metadata describing one run and its outcome."""
    config_fields = asdict(config)
    config_fields["update_mode"] = config.update_mode.value
    payload = {
        "run_id": config.run_id,
        "schema_version": TIMESERIES_SCHEMA_VERSION,
        "config": config_fields,
        "summary": {
            "ticks_run": summary.ticks_run,
            "extinct": summary.extinct,
            "peak_infected": summary.peak_infected,
            "peak_tick": summary.peak_tick,
            "fraction_infected": summary.fraction_infected,
            "final": asdict(summary.final),
        },
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))
    return path
