"""Repeated timed runs of one scenario."""

from __future__ import annotations

import logging
import statistics
import time
from dataclasses import dataclass, replace
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from sir_abm.config.constants import TIMESERIES_SCHEMA_VERSION
from sir_abm.config.types import BenchmarkConfig
from sir_abm.io.paths import benchmark_results_path, timeseries_path
from sir_abm.io.schemas import BENCHMARK_SCHEMA
from sir_abm.simulation.engine import Simulation
from sir_abm.simulation.persistence import write_timeseries_batch
from sir_abm.simulation.records import RunSummary, TimeSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenchmarkRun:
    seed: int
    elapsed_seconds: float
    summary: RunSummary


@dataclass(frozen=True)
class BenchmarkResult:
    """Timings and outcomes for every repeat."""

    runs: tuple[BenchmarkRun, ...]

    @property
    def total_seconds(self) -> float:
        return sum(r.elapsed_seconds for r in self.runs)

    @property
    def mean_seconds(self) -> float:
        return statistics.fmean(r.elapsed_seconds for r in self.runs)

    @property
    def mean_ticks(self) -> float:
        return statistics.fmean(r.summary.ticks_run for r in self.runs)

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": "benchmark",
            "repeats": len(self.runs),
            "total_seconds": self.total_seconds,
            "mean_seconds": self.mean_seconds,
            "mean_ticks": self.mean_ticks,
            "extinct_runs": sum(1 for r in self.runs if r.summary.extinct),
        }


def run_benchmark(config: BenchmarkConfig) -> BenchmarkResult:
    """Run the base scenario ``repeats`` times, each until extinct or out of ticks.

    Only simulation work is timed; writing outputs happens afterwards.
    """
    runs: list[BenchmarkRun] = []
    series_by_run: list[tuple[str, TimeSeries]] = []
    for i in range(config.repeats):
        sim_config = replace(config.base, seed=config.seed_start + i)
        started = time.perf_counter()
        sim = Simulation.create(sim_config)
        series = sim.run_until_extinct(config.max_ticks)
        elapsed = time.perf_counter() - started
        summary = sim.summary()
        runs.append(BenchmarkRun(seed=sim_config.seed, elapsed_seconds=elapsed, summary=summary))
        series_by_run.append((sim_config.run_id, series))
        logger.info(
            "benchmark run %d/%d: %d ticks in %.3fs", i + 1, config.repeats, summary.ticks_run, elapsed
        )

    result = BenchmarkResult(runs=tuple(runs))
    if config.out_dir is not None:
        _write_outputs(Path(config.out_dir), result, series_by_run)
    return result


def _write_outputs(
    out_dir: Path, result: BenchmarkResult, series_by_run: list[tuple[str, TimeSeries]]
) -> None:
    rows = [
        {
            "schema_version": TIMESERIES_SCHEMA_VERSION,
            "run": i,
            "seed": run.seed,
            "ticks_run": run.summary.ticks_run,
            "extinct": run.summary.extinct,
            "elapsed_seconds": run.elapsed_seconds,
        }
        for i, run in enumerate(result.runs)
    ]
    path = benchmark_results_path(out_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.Table.from_pylist(rows, schema=BENCHMARK_SCHEMA), path)
    write_timeseries_batch(series_by_run, timeseries_path(out_dir))
