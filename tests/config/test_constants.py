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


def test_grid_dimensions_are_positive_ints() -> None:
    assert isinstance(GRID_WIDTH, int) and GRID_WIDTH > 0
    assert isinstance(GRID_HEIGHT, int) and GRID_HEIGHT > 0


def test_initial_infected_fits_population() -> None:
    assert isinstance(POPULATION_SIZE, int) and POPULATION_SIZE > 0
    assert 0 <= INITIAL_INFECTED <= POPULATION_SIZE


def test_probabilities_in_unit_interval() -> None:
    for p in (P_INFECT, P_RECOVER, P_DEATH):
        assert 0.0 <= p <= 1.0
    assert P_RECOVER + P_DEATH <= 1.0


def test_run_counts_are_positive() -> None:
    assert MAX_TICKS > 0
    assert BENCHMARK_REPEATS > 0
    assert SWEEP_RUNS > 0


def test_sweep_parameters_name_probabilities() -> None:
    assert set(SWEEP_PARAMETERS) == {"p_infect", "p_recover", "p_death"}


def test_default_sweep_fits_safety_threshold() -> None:
    assert 4 * SWEEP_RUNS * MAX_TICKS * POPULATION_SIZE <= MAX_SWEEP_WORK_UNITS
