"""Matplotlib-based rendering functions for simulation outputs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from sir_abm.domain.agent import Agent, HealthState
from sir_abm.domain.grid import Coordinate
from sir_abm.experiments.sweep import SweepPoint
from sir_abm.io.schemas import COMPARTMENT_COLUMNS
from sir_abm.simulation.records import TimeSeries
from sir_abm.viz.theme import DEFAULT_THEME, Theme

_STATE_ORDER: tuple[HealthState, ...] = tuple(HealthState)
_EMPTY = len(_STATE_ORDER)


def _save(fig: Figure, output_path: Path, return_fig: bool) -> Figure | None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    if return_fig:
        return fig
    plt.close(fig)
    return None


# ---------------------------------------------------------------------------
# Cell-fill helpers
# ---------------------------------------------------------------------------


def _build_grid_array(agents: Sequence[Agent], grid_width: int, grid_height: int) -> np.ndarray:
    """Return (H, W) int array of the most advanced state in each cell.

    Empty cells hold the sentinel ``len(HealthState)``. Dead agents are not on
    the grid and are skipped. When several agents share a cell the highest
    state index wins (S < I < R), so infected cells stay visible.
    """
    grid = np.full((grid_height, grid_width), _EMPTY, dtype=int)
    for agent in agents:
        if not agent.is_alive:
            continue
        state = _STATE_ORDER.index(agent.state)
        current = grid[agent.y, agent.x]
        if current == _EMPTY or state > current:
            grid[agent.y, agent.x] = state
    return grid


def _state_cmap(theme: Theme = DEFAULT_THEME) -> tuple[ListedColormap, BoundaryNorm]:
    """Discrete colormap: one colour per health state plus empty cells."""
    colors = list(theme.state_colors) + [theme.empty_cell_color]
    cmap = ListedColormap(colors)
    norm = BoundaryNorm([i - 0.5 for i in range(len(colors) + 1)], cmap.N)
    return cmap, norm


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_timeseries(
    series: TimeSeries,
    output_path: Path,
    title: str | None = None,
    include_dead: bool = True,
    theme: Theme = DEFAULT_THEME,
    return_fig: bool = False,
) -> Figure | None:
    """Line plot of compartment counts per tick."""
    columns = series.to_columns()
    fig, ax = plt.subplots(figsize=(7, 4))
    for name in COMPARTMENT_COLUMNS:
        if name == "dead" and not include_dead:
            continue
        ax.plot(
            columns["tick"],
            columns[name],
            label=theme.compartment_labels.get(name, name),
            color=theme.compartment_colors.get(name),
            linewidth=1.8,
        )
    ax.set_xlabel("Tick")
    ax.set_ylabel("Agents")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    if title:
        ax.set_title(title)
    return _save(fig, output_path, return_fig)


def render_sweep(
    points: Sequence[SweepPoint],
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
    return_fig: bool = False,
) -> Figure | None:
    """Mean fraction infected (with one-sigma band) against the swept value."""
    if not points:
        raise ValueError("points must not be empty")
    parameters = {p.parameter for p in points}
    if len(parameters) != 1:
        raise ValueError("points must come from a single sweep parameter")
    ordered = sorted(points, key=lambda p: p.value)
    xs = np.array([p.value for p in ordered])
    means = np.array([p.mean_fraction_infected for p in ordered])
    stdevs = np.array([p.stdev_fraction_infected for p in ordered])

    color = theme.compartment_colors.get("infected")
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(xs, means, marker="o", color=color, label="fraction infected")
    ax.fill_between(xs, means - stdevs, means + stdevs, color=color, alpha=0.2)
    ax.set_xlabel(parameters.pop())
    ax.set_ylabel("Fraction ever infected")
    ax.set_ylim(0.0, 1.05)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    return _save(fig, output_path, return_fig)


def render_state_grid(
    agents: Sequence[Agent],
    grid_width: int,
    grid_height: int,
    output_path: Path,
    title: str | None = None,
    theme: Theme = DEFAULT_THEME,
    return_fig: bool = False,
) -> Figure | None:
    """Snapshot of agent health states on the grid itself."""
    grid = _build_grid_array(agents, grid_width, grid_height)
    cmap, norm = _state_cmap(theme)
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.imshow(grid, cmap=cmap, norm=norm, origin="upper", aspect="equal")
    if max(grid_width, grid_height) <= 50:
        for x in range(grid_width + 1):
            ax.axvline(x - 0.5, color=theme.grid_line_color, linewidth=0.5)
        for y in range(grid_height + 1):
            ax.axhline(y - 0.5, color=theme.grid_line_color, linewidth=0.5)
    ax.set_xticks([])
    ax.set_yticks([])
    handles = [
        Patch(facecolor=color, edgecolor="gray", label=state.name.title())
        for state, color in zip(_STATE_ORDER, theme.state_colors, strict=True)
        if state is not HealthState.DEAD
    ]
    handles.append(Patch(facecolor=theme.empty_cell_color, edgecolor="gray", label="Empty"))
    ax.legend(handles=handles, loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=4)
    if title:
        ax.set_title(title)
    return _save(fig, output_path, return_fig)


def render_visit_heatmap(
    visits: Mapping[Coordinate, int],
    grid_width: int,
    grid_height: int,
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
    return_fig: bool = False,
) -> Figure | None:
    """Heatmap of how many agent-ticks each cell has been occupied."""
    counts = np.zeros((grid_height, grid_width), dtype=np.int64)
    for (x, y), n in visits.items():
        counts[y, x] = n
    fig, ax = plt.subplots(figsize=(6, 5))
    img = ax.imshow(counts, cmap=theme.heatmap_cmap, origin="upper", aspect="equal")
    fig.colorbar(img, ax=ax, label="Agent-ticks")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title("Cell occupancy")
    return _save(fig, output_path, return_fig)
