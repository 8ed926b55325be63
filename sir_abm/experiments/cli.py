"""CLI entrypoint for simulation, benchmark, and sweep runs.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``sir_abm.config``                 – configuration dataclasses
- ``sir_abm.simulation.engine``      – ``Simulation`` tick loop
- ``sir_abm.simulation.persistence`` – Parquet/JSON outputs
- ``sir_abm.experiments``            – benchmark / sweep orchestration
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

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
from sir_abm.experiments.benchmark import run_benchmark
from sir_abm.experiments.sweep import run_sweep
from sir_abm.io.paths import run_payload_path, timeseries_path
from sir_abm.simulation.engine import Simulation
from sir_abm.simulation.persistence import write_run_payload, write_timeseries

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_update_mode(raw_update_mode: str) -> UpdateMode:
    """Parse update mode from CLI/config."""
    try:
        return UpdateMode(raw_update_mode)
    except ValueError as exc:
        valid = ", ".join(mode.value for mode in UpdateMode)
        raise ValueError(f"update-mode must be one of {valid}") from exc


def _parse_float_csv(raw_values: str, label: str) -> tuple[float, ...]:
    """Parse comma-delimited floats."""
    parts = [part.strip() for part in raw_values.split(",") if part.strip()]
    if not parts:
        raise ValueError(f"{label} must not be empty")
    try:
        return tuple(float(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"{label} must contain numbers") from exc


def _coerce_bool(raw: object, key: str) -> bool:
    """Flags arrive as bools from argparse and from JSON config files."""
    if not isinstance(raw, bool):
        raise ValueError(f"{key} must be true or false, got {raw!r}")
    return raw


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    if isinstance(raw, list):
        # JSON config files may give CSV options as arrays
        return ",".join(str(item) for item in raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run an agent-based SIR simulation")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--initial-infected", type=int, default=None)
    parser.add_argument("--p-infect", type=float, default=None)
    parser.add_argument("--p-recover", type=float, default=None)
    parser.add_argument("--p-death", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--update-mode",
        type=str,
        choices=[mode.value for mode in UpdateMode],
        default=None,
    )
    parser.add_argument("--ticks", type=int, default=None, help="Tick budget")
    parser.add_argument(
        "--until-extinct",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Stop early once no agent is infected",
    )
    parser.add_argument("--out-dir", type=Path, default=None)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("--benchmark", action=argparse.BooleanOptionalAction, default=None)
    mode_group.add_argument("--sweep", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--repeats", type=int, default=None)
    parser.add_argument("--sweep-parameter", type=str, choices=SWEEP_PARAMETERS, default=None)
    parser.add_argument("--sweep-values", type=str, default=None)
    parser.add_argument("--sweep-runs", type=int, default=None)
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    return parser


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint.

    Supports ``--config path/to/config.json`` for reproducible runs. CLI
    arguments override config-file values; config-file values override
    built-in defaults. Invalid parameters are reported before any tick runs.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    try:
        sim_config = SimulationConfig(
            grid_width=_get_int(args.width, "width", file_cfg, GRID_WIDTH),
            grid_height=_get_int(args.height, "height", file_cfg, GRID_HEIGHT),
            population_size=_get_int(args.population, "population", file_cfg, POPULATION_SIZE),
            initial_infected=_get_int(
                args.initial_infected, "initial_infected", file_cfg, INITIAL_INFECTED
            ),
            p_infect=_get_float(args.p_infect, "p_infect", file_cfg, P_INFECT),
            p_recover=_get_float(args.p_recover, "p_recover", file_cfg, P_RECOVER),
            p_death=_get_float(args.p_death, "p_death", file_cfg, P_DEATH),
            seed=_get_int(args.seed, "seed", file_cfg, 0),
            update_mode=_parse_update_mode(
                _get_str(args.update_mode, "update_mode", file_cfg, UpdateMode.SEQUENTIAL.value)
            ),
        )
        ticks = _get_int(args.ticks, "ticks", file_cfg, MAX_TICKS)
        if ticks < 0:
            raise ConfigurationError(f"ticks must be >= 0, got {ticks}")
        until_extinct = _get_bool(args.until_extinct, "until_extinct", file_cfg, False)
        out_dir_raw = _get_val(args.out_dir, "out_dir", file_cfg, None)
        out_dir = None if out_dir_raw is None else Path(_coerce_str(out_dir_raw, "out_dir"))
        is_benchmark = _get_bool(args.benchmark, "benchmark", file_cfg, False)
        is_sweep = _get_bool(args.sweep, "sweep", file_cfg, False)

        if is_benchmark and is_sweep:
            parser.error(
                "--benchmark and --sweep cannot both be enabled; "
                "disable one via CLI (--no-benchmark / --no-sweep) or in the config file"
            )

        if is_benchmark:
            benchmark_config = BenchmarkConfig(
                repeats=_get_int(args.repeats, "repeats", file_cfg, BENCHMARK_REPEATS),
                seed_start=sim_config.seed,
                max_ticks=ticks,
                base=sim_config,
                out_dir=out_dir,
            )
            summary = run_benchmark(benchmark_config).to_dict()
        elif is_sweep:
            sweep_config = SweepConfig(
                parameter=_get_str(args.sweep_parameter, "sweep_parameter", file_cfg, "p_recover"),
                values=_parse_float_csv(
                    _get_str(args.sweep_values, "sweep_values", file_cfg, "0.02,0.045,0.1,0.2"),
                    "sweep-values",
                ),
                n_runs=_get_int(args.sweep_runs, "sweep_runs", file_cfg, SWEEP_RUNS),
                seed_start=sim_config.seed,
                max_ticks=ticks,
                base=sim_config,
                out_dir=out_dir,
            )
            points = run_sweep(sweep_config)
            summary = {
                "mode": "sweep",
                "parameter": sweep_config.parameter,
                "runs_per_value": sweep_config.n_runs,
                "points": [
                    {
                        "value": p.value,
                        "mean_fraction_infected": p.mean_fraction_infected,
                        "stdev_fraction_infected": p.stdev_fraction_infected,
                        "mean_ticks": p.mean_ticks,
                    }
                    for p in points
                ],
            }
        else:
            summary = _run_single(sim_config, ticks, until_extinct, out_dir)
    except ValueError as exc:
        parser.error(str(exc))

    print(json.dumps(summary, ensure_ascii=False, indent=2))


def _run_single(
    config: SimulationConfig, ticks: int, until_extinct: bool, out_dir: Path | None
) -> dict[str, object]:
    sim = Simulation.create(config)
    series = sim.run_until_extinct(ticks) if until_extinct else sim.run(ticks)
    run_summary = sim.summary()
    if out_dir is not None:
        write_timeseries(series, timeseries_path(out_dir), config.run_id)
        write_run_payload(run_payload_path(out_dir, config.run_id), config, run_summary)
    return {
        "mode": "single",
        "run_id": config.run_id,
        "ticks_run": run_summary.ticks_run,
        "extinct": run_summary.extinct,
        "peak_infected": run_summary.peak_infected,
        "peak_tick": run_summary.peak_tick,
        "final": {
            "susceptible": run_summary.final.susceptible,
            "infected": run_summary.final.infected,
            "recovered": run_summary.final.recovered,
            "dead": run_summary.final.dead,
        },
    }


if __name__ == "__main__":
    main()
