"""Centralized domain constants for SIR simulation runs.

The default scenario mirrors the benchmark workload: a 100x100 torus holding
2000 agents, 10 of them infected at tick 0. Consuming modules should import
from this module rather than defining their own inline literals.
"""

from __future__ import annotations

GRID_WIDTH = 100
"""Default grid width in cells."""

GRID_HEIGHT = 100
"""Default grid height in cells."""

POPULATION_SIZE = 2000
"""Default number of agents."""

INITIAL_INFECTED = 10
"""Default number of agents infected at tick 0."""

P_INFECT = 1.0
"""Default per-contact infection probability."""

P_RECOVER = 0.045
"""Default per-tick recovery probability (mean infectious period ~21 ticks)."""

P_DEATH = 0.0025
"""Default per-tick death probability for infected agents."""

MAX_TICKS = 300
"""Default tick budget for run-until-extinct loops."""

BENCHMARK_REPEATS = 10
"""Number of timed runs in a default benchmark."""

SWEEP_RUNS = 16
"""Seeded runs averaged per value in a fraction-infected sweep."""

SWEEP_PARAMETERS: tuple[str, ...] = ("p_infect", "p_recover", "p_death")
"""Probability parameters a sweep may vary."""

MAX_SWEEP_WORK_UNITS = 50_000_000
"""Safety cap on total agent-ticks across a sweep."""

TIMESERIES_SCHEMA_VERSION = 1
"""Version tag written into run payloads and sweep tables."""
