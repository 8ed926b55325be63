"""CLI entrypoint for plotting time series, grid snapshots, and sweep results."""

from __future__ import annotations

import argparse
import json
from collections import defaultdict
from pathlib import Path

import pyarrow.parquet as pq

from sir_abm.config.types import SimulationConfig, UpdateMode
from sir_abm.experiments.sweep import SweepPoint
from sir_abm.io.paths import resolve_within_base
from sir_abm.simulation.engine import Simulation
from sir_abm.simulation.persistence import read_timeseries
from sir_abm.viz.render import (
    render_state_grid,
    render_sweep,
    render_timeseries,
    render_visit_heatmap,
)
from sir_abm.viz.theme import REGISTERED_THEMES, get_theme


def _build_timeseries_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("timeseries", help="Plot S/I/R/D curves from a time series Parquet file")
    p.set_defaults(func=_handle_timeseries)
    p.add_argument("--timeseries", type=Path, required=True)
    p.add_argument("--run-id", type=str, default=None)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--no-dead", action="store_true")
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _build_snapshot_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser(
        "snapshot", help="Replay a run from its JSON payload and draw the final grid"
    )
    p.set_defaults(func=_handle_snapshot)
    p.add_argument("--run-json", type=Path, required=True)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--heatmap-output", type=Path, default=None)
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _build_sweep_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("sweep", help="Plot fraction infected from sweep results")
    p.set_defaults(func=_handle_sweep)
    p.add_argument("--sweep-results", type=Path, required=True)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _handle_timeseries(args: argparse.Namespace) -> None:
    base_dir = Path(args.base_dir).resolve()
    series = read_timeseries(resolve_within_base(args.timeseries, base_dir), run_id=args.run_id)
    render_timeseries(
        series,
        resolve_within_base(args.output, base_dir),
        title=args.run_id,
        include_dead=not args.no_dead,
        theme=get_theme(args.theme),
    )


def _load_run_config(run_json: Path) -> tuple[SimulationConfig, int]:
    payload = json.loads(run_json.read_text())
    try:
        fields = dict(payload["config"])
        ticks_run = int(payload["summary"]["ticks_run"])
    except (KeyError, TypeError) as exc:
        raise ValueError(f"{run_json} is missing config/summary fields") from exc
    fields["update_mode"] = UpdateMode(fields.get("update_mode", UpdateMode.SEQUENTIAL.value))
    return SimulationConfig(**fields), ticks_run


def _handle_snapshot(args: argparse.Namespace) -> None:
    base_dir = Path(args.base_dir).resolve()
    config, ticks_run = _load_run_config(resolve_within_base(args.run_json, base_dir))
    # Runs are reproducible from their seed, so replaying recovers the final state
    sim = Simulation.create(config)
    sim.run(ticks_run)
    theme = get_theme(args.theme)
    render_state_grid(
        sim.agents,
        config.grid_width,
        config.grid_height,
        resolve_within_base(args.output, base_dir),
        title=f"{config.run_id} @ tick {ticks_run}",
        theme=theme,
    )
    if args.heatmap_output is not None:
        render_visit_heatmap(
            sim.cell_visit_counts(),
            config.grid_width,
            config.grid_height,
            resolve_within_base(args.heatmap_output, base_dir),
            theme=theme,
        )


def _handle_sweep(args: argparse.Namespace) -> None:
    base_dir = Path(args.base_dir).resolve()
    table = pq.read_table(resolve_within_base(args.sweep_results, base_dir))
    fractions: dict[tuple[str, float], list[float]] = defaultdict(list)
    ticks: dict[tuple[str, float], list[int]] = defaultdict(list)
    for row in table.to_pylist():
        key = (str(row["parameter"]), float(row["value"]))
        fractions[key].append(float(row["fraction_infected"]))
        ticks[key].append(int(row["ticks_run"]))
    points = [
        SweepPoint(
            parameter=parameter,
            value=value,
            fractions=tuple(values),
            mean_ticks=sum(ticks[(parameter, value)]) / len(ticks[(parameter, value)]),
        )
        for (parameter, value), values in fractions.items()
    ]
    render_sweep(points, resolve_within_base(args.output, base_dir), theme=get_theme(args.theme))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Visualization tools for simulation outputs")
    parser.add_argument("--theme", choices=sorted(REGISTERED_THEMES), default="default")
    sub = parser.add_subparsers(dest="command", required=True)
    _build_timeseries_parser(sub)
    _build_snapshot_parser(sub)
    _build_sweep_parser(sub)
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
