"""Agents and their per-tick transition rules.

State machine: SUSCEPTIBLE -> INFECTED -> {RECOVERED | DEAD}. RECOVERED and
DEAD are terminal. Each live agent runs move, infect, recover/die in that
order once per tick; the engine decides which agents take part.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from random import Random

from sir_abm.domain.grid import MOVE_OFFSETS, Coordinate, GridIndex


class HealthState(Enum):
    SUSCEPTIBLE = "S"
    INFECTED = "I"
    RECOVERED = "R"
    DEAD = "D"


@dataclass
class Agent:
    """A single agent on the grid."""

    agent_id: int
    x: int
    y: int
    state: HealthState = HealthState.SUSCEPTIBLE
    state_since: int = 0
    """Tick on which the agent entered its current state."""

    @property
    def position(self) -> Coordinate:
        return (self.x, self.y)

    @property
    def is_alive(self) -> bool:
        return self.state is not HealthState.DEAD

    def choose_target(self, grid: GridIndex, rng: Random) -> Coordinate:
        """Draw the next cell uniformly from the neighbourhood, current cell included."""
        return grid.neighbor(self.position, rng.choice(MOVE_OFFSETS))

    def relocate(self, grid: GridIndex, target: Coordinate) -> None:
        grid.move(self.agent_id, self.position, target)
        self.x, self.y = grid.wrap(target)

    def move(self, grid: GridIndex, rng: Random) -> None:
        if not self.is_alive:
            return
        self.relocate(grid, self.choose_target(grid, rng))

    def catches_infection(self, infected_contacts: int, p_infect: float, rng: Random) -> bool:
        """Roll once per infected contact; any success infects.

        Escape probability is ``(1 - p_infect) ** infected_contacts``. Rolls stop
        at the first success.
        """
        if self.state is not HealthState.SUSCEPTIBLE:
            return False
        for _ in range(infected_contacts):
            if rng.random() < p_infect:
                return True
        return False

    def infect(self, tick: int) -> None:
        self.state = HealthState.INFECTED
        self.state_since = tick

    def progression(self, p_recover: float, p_death: float, rng: Random) -> HealthState:
        """Outcome of one recover/die roll.

        A single draw partitions [0, 1): recovery, then death, then no change.
        Agents infected earlier in the same tick roll like any other infected agent.
        """
        if self.state is not HealthState.INFECTED:
            return self.state
        roll = rng.random()
        if roll < p_recover:
            return HealthState.RECOVERED
        if roll < p_recover + p_death:
            return HealthState.DEAD
        return HealthState.INFECTED

    def settle(self, outcome: HealthState, grid: GridIndex, tick: int) -> None:
        """Apply a recover/die outcome; dead agents leave the grid index."""
        if outcome is self.state:
            return
        self.state = outcome
        self.state_since = tick
        if outcome is HealthState.DEAD:
            grid.remove(self.agent_id, self.position)
