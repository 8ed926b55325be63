"""Configuration dataclasses for simulation, sweep, and benchmark runs.

All frozen dataclasses validate in ``__post_init__`` so that an invalid
parameter set never produces a half-built simulation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from sir_abm.config.constants import (
    BENCHMARK_REPEATS,
    GRID_HEIGHT,
    GRID_WIDTH,
    INITIAL_INFECTED,
    MAX_SWEEP_WORK_UNITS,
    MAX_TICKS,
    P_DEATH,
    P_INFECT,
    P_RECOVER,
    POPULATION_SIZE,
    SWEEP_PARAMETERS,
    SWEEP_RUNS,
)

__all__ = [
    "BenchmarkConfig",
    "ConfigurationError",
    "SimulationConfig",
    "SweepConfig",
    "UpdateMode",
]


class ConfigurationError(ValueError):
    """Raised when simulation parameters fall outside their valid range."""


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be in [0.0, 1.0], got {value!r}")


class UpdateMode(Enum):
    """Agent update semantics for one simulation tick."""

    SEQUENTIAL = "sequential"
    SYNCHRONOUS = "synchronous"


@dataclass(frozen=True)
class SimulationConfig:
    """Scalar parameters of one simulation run."""

    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    population_size: int = POPULATION_SIZE
    initial_infected: int = INITIAL_INFECTED
    p_infect: float = P_INFECT
    p_recover: float = P_RECOVER
    p_death: float = P_DEATH
    seed: int = 0
    update_mode: UpdateMode = UpdateMode.SEQUENTIAL

    def __post_init__(self) -> None:
        if self.grid_width < 1 or self.grid_height < 1:
            raise ConfigurationError(
                f"grid dimensions must be >= 1, got {self.grid_width}x{self.grid_height}"
            )
        if self.population_size < 0:
            raise ConfigurationError(
                f"population_size must be >= 0, got {self.population_size}"
            )
        if not 0 <= self.initial_infected <= self.population_size:
            raise ConfigurationError(
                f"initial_infected must be in [0, {self.population_size}], "
                f"got {self.initial_infected}"
            )
        _check_probability("p_infect", self.p_infect)
        _check_probability("p_recover", self.p_recover)
        _check_probability("p_death", self.p_death)
        if self.p_recover + self.p_death > 1.0:
            raise ConfigurationError(
                "p_recover + p_death must be <= 1.0, "
                f"got {self.p_recover} + {self.p_death}"
            )

    @property
    def run_id(self) -> str:
        """Reproducible identifier, stable across runs for identical settings."""
        return (
            f"w{self.grid_width}_h{self.grid_height}_n{self.population_size}"
            f"_i{self.initial_infected}_ss{self.seed}"
        )


@dataclass(frozen=True)
class SweepConfig:
    """Fraction-infected sweep over one probability parameter."""

    parameter: str = "p_recover"
    values: tuple[float, ...] = (0.02, 0.045, 0.1, 0.2)
    n_runs: int = SWEEP_RUNS
    seed_start: int = 0
    max_ticks: int = MAX_TICKS
    base: SimulationConfig = SimulationConfig()
    out_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.parameter not in SWEEP_PARAMETERS:
            valid = ", ".join(SWEEP_PARAMETERS)
            raise ConfigurationError(f"parameter must be one of {valid}, got {self.parameter!r}")
        if not self.values:
            raise ConfigurationError("values must not be empty")
        for value in self.values:
            # validates the value together with the base probabilities
            replace(self.base, **{self.parameter: value})
        if self.n_runs < 1:
            raise ConfigurationError(f"n_runs must be >= 1, got {self.n_runs}")
        if self.max_ticks < 1:
            raise ConfigurationError(f"max_ticks must be >= 1, got {self.max_ticks}")
        work_units = (
            len(self.values) * self.n_runs * self.max_ticks * self.base.population_size
        )
        if work_units > MAX_SWEEP_WORK_UNITS:
            raise ConfigurationError(
                "sweep workload exceeds safety threshold; reduce values/n_runs/max_ticks"
            )


@dataclass(frozen=True)
class BenchmarkConfig:
    """Repeated timed runs of one scenario."""

    repeats: int = BENCHMARK_REPEATS
    seed_start: int = 0
    max_ticks: int = MAX_TICKS
    base: SimulationConfig = SimulationConfig()
    out_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.repeats < 1:
            raise ConfigurationError(f"repeats must be >= 1, got {self.repeats}")
        if self.max_ticks < 1:
            raise ConfigurationError(f"max_ticks must be >= 1, got {self.max_ticks}")
