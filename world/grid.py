# world/grid.py

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterator, List, Optional, Sequence, Tuple

from world.entities import are_opposed

if TYPE_CHECKING:
    from world.entities import PhysicalUnit

# Per-coordinate terrain query: True if the tile blocks movement.
TerrainQuery = Callable[[int, int], bool]


class Cell:
    """
    One grid square.

    Tracks the units currently located here (in insertion order) and a
    static `collides` predicate describing the terrain.
    """

    def __init__(self, grid: "Grid", collides: Callable[[], bool], x: int, y: int) -> None:
        self.grid = grid
        self.collides = collides
        self.x = x
        self.y = y
        self._units: List["PhysicalUnit"] = []

    def __repr__(self) -> str:
        return f"Cell({self.x}, {self.y})"

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    @property
    def units(self) -> Tuple["PhysicalUnit", ...]:
        return tuple(self._units)

    def has_unit(self, unit: "PhysicalUnit") -> bool:
        return any(u is unit for u in self._units)

    def add_unit(self, unit: "PhysicalUnit") -> bool:
        """Add `unit` unless it is already here. Returns whether it was added."""
        if self.has_unit(unit):
            return False
        self._units.append(unit)
        return True

    def remove_unit(self, unit: "PhysicalUnit") -> bool:
        """Remove `unit` from the cell. Returns whether it was removed."""
        for i, u in enumerate(self._units):
            if u is unit:
                del self._units[i]
                return True
        return False

    @property
    def is_pathable(self) -> bool:
        """Whether a character may move into this cell."""
        if self.collides():
            return False
        return not any(u.prevents_movement for u in self._units)

    # ------------------------------------------------------------------
    # Neighbourhood
    # ------------------------------------------------------------------

    def adjacent_cells(self, radius: int = 1) -> List["Cell"]:
        return self.grid.adjacent_cells(self, radius)

    def pathable_cells(self, radius: int = 1) -> List["Cell"]:
        return self.grid.pathable_cells(self, radius)


class Grid:
    """
    Fixed width x height array of cells, created once per level.

    Every accessor is safe to call with off-grid coordinates: lookups
    return None and predicates return False.
    """

    def __init__(self, width: int, height: int, terrain: Optional[TerrainQuery] = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[Cell] = []
        for y in range(height):
            for x in range(width):
                self._cells.append(Cell(self, _collides_fn(terrain, x, y), x, y))

    @classmethod
    def from_bitmap(cls, rows: Sequence[Sequence[bool]]) -> "Grid":
        """Build a grid from row-major booleans (True blocks movement)."""
        height = len(rows)
        width = len(rows[0]) if height > 0 else 0

        def terrain(x: int, y: int) -> bool:
            return bool(rows[y][x])

        return cls(width, height, terrain)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def is_on_grid(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None if off-grid."""
        if not self.is_on_grid(x, y):
            return None
        return self._cells[x + y * self.width]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        return iter(self._cells)

    def is_pathable(self, x: int, y: int) -> bool:
        cell = self.get(x, y)
        return cell is not None and cell.is_pathable

    def get_attackable_unit(self, attacker: "PhysicalUnit", x: int, y: int) -> Optional["PhysicalUnit"]:
        """
        First unit at (x, y) that `attacker` may attack, or None.

        Neutral units can neither attack nor be attacked; units without
        stats (markers) cannot be attacked.
        """
        cell = self.get(x, y)
        if cell is None:
            return None
        for unit in cell.units:
            if unit is attacker or unit.stats is None or unit.stats.is_dead:
                continue
            if are_opposed(attacker, unit):
                return unit
        return None

    # ------------------------------------------------------------------
    # Neighbourhood
    # ------------------------------------------------------------------

    def adjacent_cells(self, center: Cell, radius: int = 1) -> List[Cell]:
        """
        All on-grid cells within Chebyshev `radius` of `center` (inclusive).

        Row-major order: y outer, x inner.
        """
        result: List[Cell] = []
        for y in range(center.y - radius, center.y + radius + 1):
            for x in range(center.x - radius, center.x + radius + 1):
                cell = self.get(x, y)
                if cell is not None:
                    result.append(cell)
        return result

    def pathable_cells(self, center: Cell, radius: int = 1) -> List[Cell]:
        return [c for c in self.adjacent_cells(center, radius) if c.is_pathable]


def _collides_fn(terrain: Optional[TerrainQuery], x: int, y: int) -> Callable[[], bool]:
    if terrain is None:
        return lambda: False
    return lambda: bool(terrain(x, y))
