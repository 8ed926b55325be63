from __future__ import annotations

from pathlib import Path

import pyarrow.parquet as pq

from sir_abm.config.types import BenchmarkConfig, SimulationConfig
from sir_abm.experiments.benchmark import run_benchmark
from sir_abm.io.paths import benchmark_results_path, timeseries_path
from sir_abm.io.schemas import BENCHMARK_SCHEMA
from sir_abm.simulation.persistence import read_timeseries

_BASE = SimulationConfig(
    grid_width=10,
    grid_height=10,
    population_size=40,
    initial_infected=4,
    p_infect=0.5,
    p_recover=0.1,
    p_death=0.01,
)


def test_benchmark_runs_each_repeat() -> None:
    result = run_benchmark(BenchmarkConfig(repeats=3, seed_start=5, max_ticks=50, base=_BASE))
    assert [run.seed for run in result.runs] == [5, 6, 7]
    assert all(run.elapsed_seconds >= 0.0 for run in result.runs)
    assert all(run.summary.ticks_run <= 50 for run in result.runs)
    assert result.total_seconds >= result.mean_seconds


def test_benchmark_summary_dict() -> None:
    result = run_benchmark(BenchmarkConfig(repeats=2, max_ticks=30, base=_BASE))
    summary = result.to_dict()
    assert summary["mode"] == "benchmark"
    assert summary["repeats"] == 2
    assert 0 <= summary["extinct_runs"] <= 2
    assert summary["mean_ticks"] == sum(r.summary.ticks_run for r in result.runs) / 2


def test_benchmark_writes_outputs(tmp_path: Path) -> None:
    cfg = BenchmarkConfig(repeats=2, seed_start=0, max_ticks=40, base=_BASE, out_dir=tmp_path)
    result = run_benchmark(cfg)
    table = pq.read_table(benchmark_results_path(tmp_path))
    assert table.schema.equals(BENCHMARK_SCHEMA)
    assert table.column("seed").to_pylist() == [0, 1]
    run_id = "w10_h10_n40_i4_ss1"
    series = read_timeseries(timeseries_path(tmp_path), run_id=run_id)
    assert len(series) == result.runs[1].summary.ticks_run + 1
