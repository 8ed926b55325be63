"""Visualization theme presets for simulation renderers.

Themes are frozen dataclasses grouping all styling constants, so renderers
take a ``Theme`` instead of module-level colour literals.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Compartment curves
    compartment_labels: dict[str, str] = field(default_factory=dict)
    compartment_colors: dict[str, str] = field(default_factory=dict)

    # Agent-state grid, in HealthState order S, I, R, D
    state_colors: tuple[str, ...] = ("#2196F3", "#FF5722", "#4CAF50", "#424242")
    empty_cell_color: str = "#F0F0F0"
    grid_line_color: str = "#CCCCCC"
    heatmap_cmap: str = "viridis"


_DEFAULT_COMPARTMENT_LABELS: dict[str, str] = {
    "susceptible": "Susceptible",
    "infected": "Infected",
    "recovered": "Recovered",
    "dead": "Dead",
}

DEFAULT_THEME = Theme(
    compartment_labels=_DEFAULT_COMPARTMENT_LABELS,
    compartment_colors={
        "susceptible": "#2196F3",
        "infected": "#FF5722",
        "recovered": "#4CAF50",
        "dead": "#424242",
    },
)

PAPER_THEME = Theme(
    compartment_labels=_DEFAULT_COMPARTMENT_LABELS,
    compartment_colors={
        "susceptible": "#1f77b4",
        "infected": "#d62728",
        "recovered": "#2ca02c",
        "dead": "#7f7f7f",
    },
    state_colors=("#1f77b4", "#d62728", "#2ca02c", "#7f7f7f"),
    empty_cell_color="#FFFFFF",
    grid_line_color="#DDDDDD",
    heatmap_cmap="magma",
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": PAPER_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a registered theme by name."""
    try:
        return REGISTERED_THEMES[name]
    except KeyError:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; choose from {valid}") from None
