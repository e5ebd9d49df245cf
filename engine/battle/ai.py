"""
Hostile AI.

Runs once per AI phase. Each hostile, in roster order, looks for friendly
units within its visibility range and spends all of its action points:
attack the nearest one if adjacent, otherwise step toward it, otherwise
idle.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from engine.error_handler import get_logger
from settings import AI_VISIBILITY_RANGE, MELEE_RANGE
from world.entities import Character, Control

if TYPE_CHECKING:
    from engine.battle.world import World

log = get_logger("ai")


class AIController:
    """
    Drives every hostile unit during the AI phase.

    This should *not* be run on the game loop, only after the player has
    ended their turn.
    """

    def __init__(
        self,
        world: "World",
        visibility_range: int = AI_VISIBILITY_RANGE,
        check_pathability: bool = True,
    ) -> None:
        self.world = world
        self.visibility_range = visibility_range
        # Without this guard a hostile may step onto a blocked tile.
        self.check_pathability = check_pathability

    @property
    def grid(self):
        return self.world.grid

    def do_turn(self) -> None:
        """Run a single AI turn for every hostile unit."""
        for hostile in list(self.world.hostiles):
            if hostile.is_dead or hostile.cell is None:
                continue
            hostile.stats.restore_full()
            nearby = self.visible_targets(hostile)
            self.do_actions(hostile, nearby)

    def visible_targets(self, unit: Character) -> List[Character]:
        """Living friendly characters within the visibility range."""
        targets: List[Character] = []
        for cell in self.grid.adjacent_cells(unit.cell, self.visibility_range):
            for other in cell.units:
                if other.control is not Control.FRIENDLY or other.stats is None:
                    continue
                if not other.stats.is_dead:
                    targets.append(other)
        return targets

    def do_actions(self, unit: Character, nearby: List[Character]) -> None:
        """Order `unit` to act until it runs out of AP."""
        while unit.stats.action_points > 0 and unit.cell is not None:
            self.do_action(unit, nearby)

    def do_action(self, unit: Character, nearby: Iterable[Character]) -> None:
        # Primary: attack.
        closest = self.closest(unit.position, (n for n in nearby if not n.is_dead and n.cell is not None))
        if closest is not None:
            if self.in_melee_range(unit, closest):
                if not self.world.perform_attack(unit, closest):
                    unit.stats.use_action_points(1)
                return

            # Secondary: move.
            self.step_towards(unit, closest)
            return

        # Tertiary: wander. For now just burn the AP.
        log.debug("%s sees nobody and idles", unit.name)
        unit.stats.use_action_points(1)

    def step_towards(self, unit: Character, target: Character) -> bool:
        """
        Step one tile toward `target`, moving each axis independently.

        Always costs one AP, even when the step is blocked.
        """
        dx = _sign(target.x - unit.x)
        dy = _sign(target.y - unit.y)
        cell = self.grid.get(unit.x + dx, unit.y + dy)

        if cell is None or (self.check_pathability and not cell.is_pathable):
            log.debug("%s is blocked stepping toward %s", unit.name, target.name)
            unit.stats.use_action_points(1)
            return False

        if self.world.perform_move(unit, cell):
            return True
        unit.stats.use_action_points(1)
        return False

    @staticmethod
    def closest(to: Tuple[int, int], candidates: Iterable[Character]) -> Optional[Character]:
        """Nearest candidate by Euclidean distance; the first one found wins ties."""
        min_distance = math.inf
        result: Optional[Character] = None
        for candidate in candidates:
            distance = math.hypot(candidate.x - to[0], candidate.y - to[1])
            if distance < min_distance:
                min_distance = distance
                result = candidate
        return result

    @staticmethod
    def in_melee_range(unit: Character, target: Character) -> bool:
        return max(abs(unit.x - target.x), abs(unit.y - target.y)) <= MELEE_RANGE


def _sign(value: int) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
