# world/entities.py

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from settings import DEFAULT_PLAYER_SPRITE
from systems.stats import Statistics

if TYPE_CHECKING:
    from world.grid import Cell, Grid


class Control(str, Enum):
    """What controls a given unit."""
    FRIENDLY = "friendly"
    HOSTILE = "hostile"
    NEUTRAL = "neutral"


def are_opposed(a: "PhysicalUnit", b: "PhysicalUnit") -> bool:
    """Whether `a` and `b` may attack each other. Neutral units never fight."""
    if Control.NEUTRAL in (a.control, b.control):
        return False
    return a.control != b.control


class PhysicalUnit:
    """
    A 2D entity located on exactly one grid cell.

    Capabilities come from what the unit carries rather than its class:
    - a sprite key makes it renderable (and renderable units block movement),
    - a Statistics block makes it able to act, be attacked and die.

    A unit without a sprite is a purely logical marker (spawn point,
    invisible trigger) that never blocks movement.
    """

    stats: Optional[Statistics] = None

    def __init__(
        self,
        cell: "Cell",
        control: Control = Control.NEUTRAL,
        sprite: Optional[str] = None,
    ) -> None:
        self._cell: Optional["Cell"] = cell
        self.control = control
        self.sprite = sprite
        # Direction the unit last moved in, radians (atan2(dy, dx)).
        self.facing: float = 0.0
        cell.add_unit(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.control.value} @ {self.position})"

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    @property
    def cell(self) -> Optional["Cell"]:
        return self._cell

    @property
    def grid(self) -> Optional["Grid"]:
        return self._cell.grid if self._cell is not None else None

    @property
    def x(self) -> int:
        return self._cell.x if self._cell is not None else -1

    @property
    def y(self) -> int:
        return self._cell.y if self._cell is not None else -1

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    @property
    def is_on_grid(self) -> bool:
        return self._cell is not None

    @property
    def is_visible(self) -> bool:
        return self.sprite is not None

    @property
    def prevents_movement(self) -> bool:
        return self.is_visible

    def move_immediate(self, new_cell: "Cell") -> bool:
        """
        Move the unit to `new_cell` right away.

        NOTE: does not validate that the move is legal (range, pathability).
        Returns whether the unit moved.
        """
        old_cell = self._cell
        if old_cell is not None:
            if old_cell is not new_cell:
                self.facing = math.atan2(new_cell.y - old_cell.y, new_cell.x - old_cell.x)
            old_cell.remove_unit(self)
        self._cell = new_cell
        new_cell.add_unit(self)
        return True

    def remove_from_grid(self) -> None:
        """Take the unit out of its cell's occupancy (on death)."""
        if self._cell is not None:
            self._cell.remove_unit(self)
            self._cell = None

    def new_turn(self) -> None:
        """Update this unit's state for the start of its side's phase."""
        pass


class Character(PhysicalUnit):
    """A named, renderable unit with hit points and action points."""

    def __init__(
        self,
        cell: "Cell",
        name: str,
        stats: Statistics,
        control: Control = Control.FRIENDLY,
        sprite: str = DEFAULT_PLAYER_SPRITE,
    ) -> None:
        self.name = name
        self.stats = stats
        super().__init__(cell, control, sprite)

    def __repr__(self) -> str:
        return (
            f"Character({self.name!r}, {self.control.value} @ {self.position}, "
            f"HP {self.stats.hit_points}/{self.stats.max_hit_points}, "
            f"AP {self.stats.action_points})"
        )

    def move_immediate(self, new_cell: "Cell") -> bool:
        """Spend one action point and move. Nothing happens without AP."""
        if not self.stats.use_action_points(1):
            return False
        return super().move_immediate(new_cell)

    def attack(self, target: "Character") -> bool:
        """
        Spend one action point to take one hit point from `target`.

        No range check: callers only attack targets that were offered as a
        legal action. Returns whether the attack happened.
        """
        if not self.stats.use_action_points(1):
            return False
        target.stats.use_hit_points(1)
        return True

    def new_turn(self) -> None:
        self.stats.restore_full()
        super().new_turn()

    @property
    def is_dead(self) -> bool:
        return self.stats.is_dead
