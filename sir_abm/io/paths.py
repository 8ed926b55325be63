"""Path construction helpers for simulation output directories."""

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


def runs_dir(out_dir: Path) -> Path:
    return out_dir / "runs"


def logs_dir(out_dir: Path) -> Path:
    return out_dir / "logs"


def timeseries_path(out_dir: Path) -> Path:
    """Return path to the time series Parquet file."""
    return logs_dir(out_dir) / "timeseries.parquet"


def run_payload_path(out_dir: Path, run_id: str) -> Path:
    """Return path to the JSON metadata file for one run."""
    return runs_dir(out_dir) / f"{run_id}.json"


def sweep_results_path(out_dir: Path) -> Path:
    return logs_dir(out_dir) / "sweep_results.parquet"


def benchmark_results_path(out_dir: Path) -> Path:
    return logs_dir(out_dir) / "benchmark_results.parquet"
