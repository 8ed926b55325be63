"""Simulation engine: owns the population and grid index, advances whole ticks.

Sequential mode (default): each live agent, in population order, moves, then
attempts infection against its new cell, then rolls recovery/death. Later
agents see the moves and infections of earlier agents in the same tick.

Synchronous mode: every move target and next state is computed against a
frozen snapshot of the previous tick, then all changes are committed at once.
An agent is either infected or rolls recovery/death in a given tick, never
both, since its snapshot state is still susceptible when infection is judged.
This removes order effects but is not trajectory-identical to sequential mode.
"""

from __future__ import annotations

import logging
from collections import Counter
from random import Random

from sir_abm.config.types import SimulationConfig, UpdateMode
from sir_abm.domain.agent import Agent, HealthState
from sir_abm.domain.grid import Coordinate, GridIndex
from sir_abm.simulation.records import RunSummary, TickSummary, TimeSeries

logger = logging.getLogger(__name__)


class Simulation:
    """One seeded agent-based SIR run."""

    def __init__(
        self,
        config: SimulationConfig,
        agents: list[Agent],
        grid: GridIndex,
        rng: Random,
    ) -> None:
        self._config = config
        self._agents = agents
        self._grid = grid
        self._rng = rng
        self._tick = 0
        self._visits: Counter[Coordinate] = Counter(a.position for a in agents)
        self._records: list[TickSummary] = [self._tally()]

    @classmethod
    def create(cls, config: SimulationConfig) -> Simulation:
        """Place agents uniformly at random and seed the initial infections."""
        rng = Random(config.seed)
        w, h = config.grid_width, config.grid_height
        infected_ids = set(rng.sample(range(config.population_size), config.initial_infected))

        grid = GridIndex(w, h)
        agents: list[Agent] = []
        for agent_id in range(config.population_size):
            state = (
                HealthState.INFECTED if agent_id in infected_ids else HealthState.SUSCEPTIBLE
            )
            agent = Agent(agent_id=agent_id, x=rng.randrange(w), y=rng.randrange(h), state=state)
            agents.append(agent)
            grid.insert(agent_id, agent.position)

        logger.info(
            "created simulation %s: %d agents on %dx%d, %d infected",
            config.run_id,
            config.population_size,
            w,
            h,
            config.initial_infected,
        )
        return cls(config=config, agents=agents, grid=grid, rng=rng)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def agents(self) -> tuple[Agent, ...]:
        return tuple(self._agents)

    @property
    def grid(self) -> GridIndex:
        return self._grid

    @property
    def time_series(self) -> TimeSeries:
        return TimeSeries(self._records)

    def counts(self) -> TickSummary:
        return self._records[-1]

    def is_extinct(self) -> bool:
        return self._records[-1].infected == 0

    def cell_visit_counts(self) -> dict[Coordinate, int]:
        """Agent-ticks spent in each cell, initial placement included."""
        return dict(self._visits)

    def summary(self) -> RunSummary:
        series = self.time_series
        return RunSummary(
            ticks_run=self._tick,
            extinct=self.is_extinct(),
            final=series.final,
            peak_infected=series.peak_infected,
            peak_tick=series.peak_tick,
        )

    # ------------------------------------------------------------------
    # Advancing time
    # ------------------------------------------------------------------

    def step(self) -> TickSummary:
        """Advance exactly one tick and return its record."""
        self._tick += 1
        if self._config.update_mode == UpdateMode.SYNCHRONOUS:
            self._step_synchronous()
        else:
            self._step_sequential()
        record = self._tally()
        self._records.append(record)
        logger.debug(
            "tick %d: S=%d I=%d R=%d D=%d",
            record.tick,
            record.susceptible,
            record.infected,
            record.recovered,
            record.dead,
        )
        return record

    def run(self, num_ticks: int) -> TimeSeries:
        """Step *num_ticks* times and return the accumulated series."""
        if num_ticks < 0:
            raise ValueError("num_ticks must be >= 0")
        for _ in range(num_ticks):
            self.step()
        return self.time_series

    def run_until_extinct(self, max_ticks: int) -> TimeSeries:
        """Step while any agent is infected, for at most *max_ticks* ticks."""
        if max_ticks < 0:
            raise ValueError("max_ticks must be >= 0")
        for _ in range(max_ticks):
            if self.is_extinct():
                break
            self.step()
        if self.is_extinct():
            logger.info("%s: infection extinct at tick %d", self._config.run_id, self._tick)
        return self.time_series

    def _step_sequential(self) -> None:
        cfg = self._config
        tick = self._tick
        for agent in self._agents:
            if not agent.is_alive:
                continue
            agent.move(self._grid, self._rng)
            self._visits[agent.position] += 1
            contacts = self._infected_contacts(agent.position)
            if agent.catches_infection(contacts, cfg.p_infect, self._rng):
                agent.infect(tick)
            outcome = agent.progression(cfg.p_recover, cfg.p_death, self._rng)
            agent.settle(outcome, self._grid, tick)

    def _step_synchronous(self) -> None:
        cfg = self._config
        tick = self._tick
        # Phase 1: decide targets and outcomes against the frozen previous tick
        frozen_infected: Counter[Coordinate] = Counter(
            a.position for a in self._agents if a.state is HealthState.INFECTED
        )
        plans: list[tuple[Agent, Coordinate, HealthState]] = []
        for agent in self._agents:
            if not agent.is_alive:
                continue
            target = self._grid.wrap(agent.choose_target(self._grid, self._rng))
            if agent.catches_infection(frozen_infected[target], cfg.p_infect, self._rng):
                outcome = HealthState.INFECTED
            else:
                outcome = agent.progression(cfg.p_recover, cfg.p_death, self._rng)
            plans.append((agent, target, outcome))
        # Phase 2: commit moves, then transitions
        for agent, target, _ in plans:
            agent.relocate(self._grid, target)
            self._visits[agent.position] += 1
        for agent, _, outcome in plans:
            if outcome is HealthState.INFECTED and agent.state is HealthState.SUSCEPTIBLE:
                agent.infect(tick)
            else:
                agent.settle(outcome, self._grid, tick)

    def _infected_contacts(self, position: Coordinate) -> int:
        return sum(
            1
            for other_id in self._grid.occupants(position)
            if self._agents[other_id].state is HealthState.INFECTED
        )

    def _tally(self) -> TickSummary:
        counts = Counter(agent.state for agent in self._agents)
        return TickSummary(
            tick=self._tick,
            susceptible=counts[HealthState.SUSCEPTIBLE],
            infected=counts[HealthState.INFECTED],
            recovered=counts[HealthState.RECOVERED],
            dead=counts[HealthState.DEAD],
        )


def initialize(
    width: int,
    height: int,
    population_size: int,
    initial_infected_count: int,
    p_infect: float,
    p_recover: float,
    p_death: float,
    random_seed: int,
    update_mode: UpdateMode = UpdateMode.SEQUENTIAL,
) -> Simulation:
    """Validate the parameters and build a ready-to-step simulation.

    Raises :class:`~sir_abm.config.types.ConfigurationError` for out-of-range
    probabilities, non-positive grid dimensions, or more initial infections
    than agents.
    """
    config = SimulationConfig(
        grid_width=width,
        grid_height=height,
        population_size=population_size,
        initial_infected=initial_infected_count,
        p_infect=p_infect,
        p_recover=p_recover,
        p_death=p_death,
        seed=random_seed,
        update_mode=update_mode,
    )
    return Simulation.create(config)
