"""Agent-based SIR epidemic simulation on a toroidal grid."""

from sir_abm.config.types import ConfigurationError, SimulationConfig, UpdateMode
from sir_abm.domain.agent import Agent, HealthState
from sir_abm.domain.grid import GridIndex
from sir_abm.simulation.engine import Simulation, initialize
from sir_abm.simulation.records import RunSummary, TickSummary, TimeSeries

__all__ = [
    "Agent",
    "ConfigurationError",
    "GridIndex",
    "HealthState",
    "RunSummary",
    "Simulation",
    "SimulationConfig",
    "TickSummary",
    "TimeSeries",
    "UpdateMode",
    "initialize",
]
