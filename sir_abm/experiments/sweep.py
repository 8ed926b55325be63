"""Fraction-infected sweep over one probability parameter.

For each value, ``n_runs`` seeded simulations run until the infection dies
out (or the tick budget is spent), and the share of agents that were ever
infected is averaged.
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass, replace
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from sir_abm.config.constants import TIMESERIES_SCHEMA_VERSION
from sir_abm.config.types import SweepConfig
from sir_abm.io.paths import sweep_results_path
from sir_abm.io.schemas import SWEEP_SCHEMA
from sir_abm.simulation.engine import Simulation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepPoint:
    """Averaged outcome for one parameter value."""

    parameter: str
    value: float
    fractions: tuple[float, ...]
    mean_ticks: float

    @property
    def mean_fraction_infected(self) -> float:
        return statistics.fmean(self.fractions)

    @property
    def stdev_fraction_infected(self) -> float:
        if len(self.fractions) < 2:
            return 0.0
        return statistics.stdev(self.fractions)


def run_sweep(config: SweepConfig) -> list[SweepPoint]:
    points: list[SweepPoint] = []
    rows: list[dict[str, int | float | str | bool]] = []
    for value in config.values:
        fractions: list[float] = []
        ticks: list[int] = []
        for run in range(config.n_runs):
            seed = config.seed_start + run
            sim_config = replace(config.base, seed=seed, **{config.parameter: value})
            sim = Simulation.create(sim_config)
            sim.run_until_extinct(config.max_ticks)
            summary = sim.summary()
            fractions.append(summary.fraction_infected)
            ticks.append(summary.ticks_run)
            rows.append(
                {
                    "schema_version": TIMESERIES_SCHEMA_VERSION,
                    "parameter": config.parameter,
                    "value": float(value),
                    "run": run,
                    "seed": seed,
                    "ticks_run": summary.ticks_run,
                    "extinct": summary.extinct,
                    "fraction_infected": summary.fraction_infected,
                    "dead": summary.final.dead,
                }
            )
        point = SweepPoint(
            parameter=config.parameter,
            value=float(value),
            fractions=tuple(fractions),
            mean_ticks=statistics.fmean(ticks),
        )
        logger.info(
            "%s=%g: mean fraction infected %.3f over %d runs",
            config.parameter,
            value,
            point.mean_fraction_infected,
            config.n_runs,
        )
        points.append(point)

    if config.out_dir is not None:
        path = sweep_results_path(Path(config.out_dir))
        path.parent.mkdir(parents=True, exist_ok=True)
        pq.write_table(pa.Table.from_pylist(rows, schema=SWEEP_SCHEMA), path)
    return points
