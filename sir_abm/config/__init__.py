"""Configuration layer: constants and typed config dataclasses."""

from sir_abm.config.constants import (
    BENCHMARK_REPEATS,
    GRID_HEIGHT,
    GRID_WIDTH,
    INITIAL_INFECTED,
    MAX_TICKS,
    P_DEATH,
    P_INFECT,
    P_RECOVER,
    POPULATION_SIZE,
    SWEEP_PARAMETERS,
    SWEEP_RUNS,
)
from sir_abm.config.types import (
    BenchmarkConfig,
    ConfigurationError,
    SimulationConfig,
    SweepConfig,
    UpdateMode,
)

__all__ = [
    "BENCHMARK_REPEATS",
    "BenchmarkConfig",
    "ConfigurationError",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "INITIAL_INFECTED",
    "MAX_TICKS",
    "P_DEATH",
    "P_INFECT",
    "P_RECOVER",
    "POPULATION_SIZE",
    "SWEEP_PARAMETERS",
    "SWEEP_RUNS",
    "SimulationConfig",
    "SweepConfig",
    "UpdateMode",
]
