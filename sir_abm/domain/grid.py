"""Sparse occupancy index for a toroidal grid.

Coordinates wrap with Python's floor modulus, so a step west from column 0
lands in column ``width - 1`` rather than at a negative index. Empty cells are
never stored: the index scales with the number of occupied cells, not with
grid area.
"""

from __future__ import annotations

from collections.abc import Iterator

from sir_abm.config.types import ConfigurationError

Coordinate = tuple[int, int]

# Moore neighbourhood plus the current cell ("stay or step")
MOVE_OFFSETS: tuple[Coordinate, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),  (0, 0),  (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)  # fmt: skip


class GridIndex:
    """Maps wrapped coordinates to the ids of the agents occupying them."""

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ConfigurationError(f"grid dimensions must be >= 1, got {width}x{height}")
        self._width = width
        self._height = height
        self._cells: dict[Coordinate, set[int]] = {}

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def wrap(self, coordinate: Coordinate) -> Coordinate:
        """Return *coordinate* folded onto ``[0, width) x [0, height)``."""
        x, y = coordinate
        return (x % self._width, y % self._height)

    def neighbor(self, coordinate: Coordinate, offset: Coordinate) -> Coordinate:
        """Return the wrapped cell reached from *coordinate* by *offset*."""
        return self.wrap((coordinate[0] + offset[0], coordinate[1] + offset[1]))

    def insert(self, agent_id: int, coordinate: Coordinate) -> None:
        cell = self.wrap(coordinate)
        occupants = self._cells.get(cell)
        if occupants is None:
            occupants = set()
            self._cells[cell] = occupants
        occupants.add(agent_id)

    def remove(self, agent_id: int, coordinate: Coordinate) -> None:
        """Drop *agent_id* from *coordinate*; the entry goes once it is empty."""
        cell = self.wrap(coordinate)
        occupants = self._cells.get(cell)
        if occupants is None:
            return
        occupants.discard(agent_id)
        if not occupants:
            del self._cells[cell]

    def move(self, agent_id: int, source: Coordinate, target: Coordinate) -> None:
        self.remove(agent_id, source)
        self.insert(agent_id, target)

    def occupants(self, coordinate: Coordinate) -> frozenset[int]:
        return frozenset(self._cells.get(self.wrap(coordinate), ()))

    def occupied_cells(self) -> Iterator[Coordinate]:
        return iter(self._cells)

    def occupied_ids(self) -> set[int]:
        """Union of every occupant set."""
        ids: set[int] = set()
        for occupants in self._cells.values():
            ids.update(occupants)
        return ids

    def __contains__(self, coordinate: object) -> bool:
        if not isinstance(coordinate, tuple) or len(coordinate) != 2:
            return False
        return self.wrap(coordinate) in self._cells

    def __len__(self) -> int:
        return len(self._cells)
