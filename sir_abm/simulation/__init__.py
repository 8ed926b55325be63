"""Simulation engine: tick loop, compartment records, and output persistence."""

from sir_abm.simulation.engine import Simulation, initialize
from sir_abm.simulation.persistence import (
    read_timeseries,
    write_run_payload,
    write_timeseries,
    write_timeseries_batch,
)
from sir_abm.simulation.records import RunSummary, TickSummary, TimeSeries

__all__ = [
    "RunSummary",
    "Simulation",
    "TickSummary",
    "TimeSeries",
    "initialize",
    "read_timeseries",
    "write_run_payload",
    "write_timeseries",
    "write_timeseries_batch",
]
