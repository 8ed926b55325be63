"""Domain layer: grid occupancy index, agents, and transition rules."""

from sir_abm.domain.agent import Agent, HealthState
from sir_abm.domain.grid import MOVE_OFFSETS, Coordinate, GridIndex

__all__ = [
    "Agent",
    "Coordinate",
    "GridIndex",
    "HealthState",
    "MOVE_OFFSETS",
]
