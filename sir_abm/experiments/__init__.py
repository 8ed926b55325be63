"""Experiment orchestration: timed benchmark runs and parameter sweeps."""

from sir_abm.experiments.benchmark import BenchmarkResult, BenchmarkRun, run_benchmark
from sir_abm.experiments.sweep import SweepPoint, run_sweep

__all__ = [
    "BenchmarkResult",
    "BenchmarkRun",
    "SweepPoint",
    "run_benchmark",
    "run_sweep",
]
