"""Per-tick compartment records and the read-only time series built from them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload


@dataclass(frozen=True)
class TickSummary:
    """Compartment counts after one tick (tick 0 is the initial population)."""

    tick: int
    susceptible: int
    infected: int
    recovered: int
    dead: int

    @property
    def total(self) -> int:
        return self.susceptible + self.infected + self.recovered + self.dead


class TimeSeries(Sequence[TickSummary]):
    """Immutable ordered sequence of :class:`TickSummary` records."""

    def __init__(self, records: Iterable[TickSummary] = ()) -> None:
        self._records: tuple[TickSummary, ...] = tuple(records)

    @overload
    def __getitem__(self, index: int) -> TickSummary: ...

    @overload
    def __getitem__(self, index: slice) -> TimeSeries: ...

    def __getitem__(self, index: int | slice) -> TickSummary | TimeSeries:
        if isinstance(index, slice):
            return TimeSeries(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TickSummary]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"TimeSeries(len={len(self._records)})"

    @property
    def final(self) -> TickSummary:
        if not self._records:
            raise ValueError("time series is empty")
        return self._records[-1]

    @property
    def peak_infected(self) -> int:
        return max((r.infected for r in self._records), default=0)

    @property
    def peak_tick(self) -> int:
        """First tick at which the infected count peaks."""
        if not self._records:
            return 0
        peak = self.peak_infected
        return next(r.tick for r in self._records if r.infected == peak)

    def to_columns(self) -> dict[str, list[int]]:
        """Column-oriented view suitable for ``pyarrow.Table.from_pydict``."""
        return {
            "tick": [r.tick for r in self._records],
            "susceptible": [r.susceptible for r in self._records],
            "infected": [r.infected for r in self._records],
            "recovered": [r.recovered for r in self._records],
            "dead": [r.dead for r in self._records],
        }


@dataclass(frozen=True)
class RunSummary:
    """Headline numbers for benchmarking and reporting collaborators."""

    ticks_run: int
    extinct: bool
    final: TickSummary
    peak_infected: int
    peak_tick: int

    @property
    def fraction_infected(self) -> float:
        """Share of the population that was ever infected."""
        if self.final.total == 0:
            return 0.0
        return 1.0 - self.final.susceptible / self.final.total
