# world/actions.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from settings import ACTION_RADIUS

if TYPE_CHECKING:
    from world.entities import PhysicalUnit
    from world.grid import Grid


class UnitActionType(str, Enum):
    MOVE = "move"
    ATTACK = "attack"


@dataclass(frozen=True)
class UnitAction:
    """One legal action available to a unit this turn."""
    type: UnitActionType
    position: Tuple[int, int]
    target_unit: Optional["PhysicalUnit"] = field(default=None, compare=False)


def get_unit_actions(grid: "Grid", unit: "PhysicalUnit", radius: int = ACTION_RADIUS) -> List[UnitAction]:
    """
    Enumerate the moves and attacks `unit` can make from where it stands.

    Scans the neighbourhood in row-major order. A cell holding an
    attackable unit yields an attack; otherwise a pathable cell yields a
    move. Dead units, units without stats, units off the grid and units
    out of AP get nothing.
    """
    center = unit.cell
    if center is None or unit.stats is None or unit.stats.is_dead or unit.stats.action_points <= 0:
        return []

    actions: List[UnitAction] = []
    for cell in grid.adjacent_cells(center, radius):
        if cell is center:
            continue
        target = grid.get_attackable_unit(unit, cell.x, cell.y)
        if target is not None:
            actions.append(UnitAction(UnitActionType.ATTACK, cell.position, target))
        elif cell.is_pathable:
            actions.append(UnitAction(UnitActionType.MOVE, cell.position))
    return actions
