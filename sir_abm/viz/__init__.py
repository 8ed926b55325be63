"""Visualization layer: themes, renderers, and CLI."""

from sir_abm.viz.cli import main
from sir_abm.viz.render import (
    render_state_grid,
    render_sweep,
    render_timeseries,
    render_visit_heatmap,
)
from sir_abm.viz.theme import DEFAULT_THEME, PAPER_THEME, REGISTERED_THEMES, Theme, get_theme

__all__ = [
    "DEFAULT_THEME",
    "PAPER_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "get_theme",
    "main",
    "render_state_grid",
    "render_sweep",
    "render_timeseries",
    "render_visit_heatmap",
]
