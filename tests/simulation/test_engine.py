"""Tests for the Simulation tick loop."""

from __future__ import annotations

from random import Random

import pytest

from sir_abm.config.types import ConfigurationError, SimulationConfig, UpdateMode
from sir_abm.domain.agent import Agent, HealthState
from sir_abm.domain.grid import GridIndex
from sir_abm.simulation.engine import Simulation, initialize


def _config(**overrides: object) -> SimulationConfig:
    params: dict[str, object] = {
        "grid_width": 10,
        "grid_height": 10,
        "population_size": 50,
        "initial_infected": 5,
        "p_infect": 0.3,
        "p_recover": 0.1,
        "p_death": 0.01,
        "seed": 42,
    }
    params.update(overrides)
    return SimulationConfig(**params)  # type: ignore[arg-type]


def _assert_index_consistent(sim: Simulation) -> None:
    live = [a for a in sim.agents if a.is_alive]
    assert sim.grid.occupied_ids() == {a.agent_id for a in live}
    for agent in live:
        assert agent.agent_id in sim.grid.occupants(agent.position)
        assert 0 <= agent.x < sim.config.grid_width
        assert 0 <= agent.y < sim.config.grid_height
    for cell in sim.grid.occupied_cells():
        assert sim.grid.occupants(cell)


class TestCreate:
    def test_population_and_initial_infections(self) -> None:
        sim = Simulation.create(_config())
        counts = sim.counts()
        assert counts.tick == 0
        assert counts.infected == 5
        assert counts.susceptible == 45
        assert counts.recovered == counts.dead == 0
        assert len(sim.agents) == 50
        assert [a.agent_id for a in sim.agents] == list(range(50))

    def test_index_consistent_after_placement(self) -> None:
        _assert_index_consistent(Simulation.create(_config()))

    def test_time_series_starts_with_initial_record(self) -> None:
        sim = Simulation.create(_config())
        assert len(sim.time_series) == 1
        assert sim.tick == 0

    def test_empty_population(self) -> None:
        sim = Simulation.create(_config(population_size=0, initial_infected=0))
        series = sim.run(3)
        assert all(r.total == 0 for r in series)
        assert len(sim.grid) == 0

    def test_initialize_builds_simulation(self) -> None:
        sim = initialize(10, 10, 50, 5, 0.3, 0.1, 0.01, 42)
        assert sim.config == _config()

    def test_initialize_rejects_bad_probability(self) -> None:
        with pytest.raises(ConfigurationError):
            initialize(10, 10, 50, 5, 1.5, 0.1, 0.01, 42)

    def test_initialize_rejects_too_many_infected(self) -> None:
        with pytest.raises(ConfigurationError):
            initialize(10, 10, 5, 6, 0.3, 0.1, 0.01, 42)

    def test_initialize_rejects_empty_grid(self) -> None:
        with pytest.raises(ConfigurationError):
            initialize(0, 10, 5, 1, 0.3, 0.1, 0.01, 42)


class TestStepInvariants:
    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_population_is_conserved(self, mode: UpdateMode) -> None:
        sim = Simulation.create(_config(update_mode=mode))
        for record in sim.run(60):
            assert record.total == 50

    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_index_stays_consistent(self, mode: UpdateMode) -> None:
        sim = Simulation.create(_config(update_mode=mode, p_death=0.05))
        for _ in range(40):
            sim.step()
            _assert_index_consistent(sim)

    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_compartments_are_monotonic(self, mode: UpdateMode) -> None:
        series = Simulation.create(_config(update_mode=mode, p_death=0.05)).run(80)
        for prev, curr in zip(series, series[1:]):
            assert curr.susceptible <= prev.susceptible
            assert curr.recovered >= prev.recovered
            assert curr.dead >= prev.dead

    def test_terminal_states_never_change(self) -> None:
        sim = Simulation.create(_config(p_recover=0.3, p_death=0.1))
        settled: dict[int, HealthState] = {}
        for _ in range(50):
            sim.step()
            for agent in sim.agents:
                if agent.agent_id in settled:
                    assert agent.state is settled[agent.agent_id]
                elif agent.state in (HealthState.RECOVERED, HealthState.DEAD):
                    settled[agent.agent_id] = agent.state
        assert settled

    def test_dead_agents_stay_put_off_grid(self) -> None:
        sim = Simulation.create(
            _config(
                grid_width=5,
                grid_height=5,
                population_size=30,
                initial_infected=30,
                p_infect=0.0,
                p_recover=0.0,
                p_death=0.5,
            )
        )
        sim.step()
        dead = {a.agent_id: a.position for a in sim.agents if a.state is HealthState.DEAD}
        assert dead
        sim.run(3)
        for agent in sim.agents:
            if agent.agent_id in dead:
                assert agent.position == dead[agent.agent_id]
                assert agent.agent_id not in sim.grid.occupied_ids()

    def test_ticks_are_consecutive(self) -> None:
        series = Simulation.create(_config()).run(10)
        assert [r.tick for r in series] == list(range(11))

    def test_step_returns_latest_record(self) -> None:
        sim = Simulation.create(_config())
        record = sim.step()
        assert record == sim.counts()
        assert record.tick == sim.tick == 1

    def test_run_zero_ticks(self) -> None:
        sim = Simulation.create(_config())
        assert len(sim.run(0)) == 1

    def test_run_negative_ticks_raises(self) -> None:
        sim = Simulation.create(_config())
        with pytest.raises(ValueError, match="num_ticks"):
            sim.run(-1)
        with pytest.raises(ValueError, match="max_ticks"):
            sim.run_until_extinct(-1)


class TestDeterminism:
    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_same_seed_same_trajectory(self, mode: UpdateMode) -> None:
        a = Simulation.create(_config(update_mode=mode)).run(50)
        b = Simulation.create(_config(update_mode=mode)).run(50)
        assert a == b

    def test_same_seed_same_positions(self) -> None:
        a = Simulation.create(_config())
        b = Simulation.create(_config())
        a.run(20)
        b.run(20)
        assert [x.position for x in a.agents] == [y.position for y in b.agents]

    def test_different_seed_differs(self) -> None:
        a = Simulation.create(_config(seed=1))
        b = Simulation.create(_config(seed=2))
        assert [x.position for x in a.agents] != [y.position for y in b.agents]


class TestEpidemicScenarios:
    def test_zero_infected_stays_susceptible(self) -> None:
        sim = Simulation.create(_config(initial_infected=0))
        series = sim.run(50)
        assert all(r.infected == 0 and r.susceptible == 50 for r in series)

    def test_run_until_extinct_with_no_infection_runs_no_ticks(self) -> None:
        sim = Simulation.create(_config(initial_infected=0))
        series = sim.run_until_extinct(100)
        assert sim.tick == 0
        assert len(series) == 1
        assert sim.summary().extinct

    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_certain_infection_on_single_cell(self, mode: UpdateMode) -> None:
        sim = Simulation.create(
            _config(
                grid_width=1,
                grid_height=1,
                population_size=20,
                initial_infected=1,
                p_infect=1.0,
                p_recover=0.0,
                p_death=0.0,
                update_mode=mode,
            )
        )
        record = sim.step()
        assert record.infected == 20
        assert record.susceptible == 0

    def test_newly_infected_roll_recovery_same_tick(self) -> None:
        config = _config(
            grid_width=1,
            grid_height=1,
            population_size=5,
            initial_infected=1,
            p_infect=1.0,
            p_recover=1.0,
            p_death=0.0,
        )
        grid = GridIndex(1, 1)
        agents = [Agent(agent_id=i, x=0, y=0) for i in range(5)]
        agents[-1].state = HealthState.INFECTED
        for agent in agents:
            grid.insert(agent.agent_id, agent.position)
        sim = Simulation(config=config, agents=agents, grid=grid, rng=Random(0))
        record = sim.step()
        assert record.recovered == 5
        assert record.infected == 0
        assert all(a.state_since == 1 for a in sim.agents)

    def test_runs_to_extinction(self) -> None:
        sim = Simulation.create(_config())
        series = sim.run_until_extinct(1000)
        final = series.final
        assert sim.is_extinct()
        assert final.infected == 0
        assert final.susceptible + final.recovered + final.dead == 50
        assert final.recovered + final.dead >= 5
        assert sim.tick < 1000

    def test_single_seed_outbreak_ends_within_budget(self) -> None:
        sim = initialize(10, 10, 50, 1, 0.3, 0.1, 0.01, 42)
        series = sim.run_until_extinct(200)
        assert sim.is_extinct()
        assert sim.tick <= 200
        assert series.final.total == 50
        assert series.final.recovered + series.final.dead >= 1

    def test_whole_population_resolves_when_everyone_is_infected(self) -> None:
        sim = Simulation.create(
            _config(
                grid_width=1,
                grid_height=1,
                population_size=10,
                initial_infected=3,
                p_infect=1.0,
                p_recover=0.02,
                p_death=0.01,
            )
        )
        sim.run_until_extinct(5000)
        final = sim.counts()
        assert final.infected == 0
        assert final.recovered + final.dead == 10

    def test_summary(self) -> None:
        sim = Simulation.create(_config())
        series = sim.run_until_extinct(1000)
        summary = sim.summary()
        assert summary.ticks_run == sim.tick
        assert summary.extinct
        assert summary.final == series.final
        assert summary.peak_infected == max(r.infected for r in series)
        assert series[summary.peak_tick].infected == summary.peak_infected
        assert 0.0 < summary.fraction_infected <= 1.0


class TestVisitCounts:
    def test_counts_initial_placement(self) -> None:
        sim = Simulation.create(_config())
        assert sum(sim.cell_visit_counts().values()) == 50

    @pytest.mark.parametrize("mode", list(UpdateMode))
    def test_one_visit_per_live_agent_per_tick(self, mode: UpdateMode) -> None:
        sim = Simulation.create(_config(p_death=0.0, update_mode=mode))
        sim.run(7)
        visits = sim.cell_visit_counts()
        assert sum(visits.values()) == 50 * 8
        assert all(0 <= x < 10 and 0 <= y < 10 for x, y in visits)
