"""
Battle type definitions.

Contains the turn phase enum, highlight kinds, movement animation state and
the observer interface the presentation layer implements.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from world.entities import Character, PhysicalUnit


class TurnPhase(str, Enum):
    PLAYER = "player"
    AI = "ai"


class HighlightKind(str, Enum):
    SELECTED = "selected"
    MOVE = "move"
    ATTACK = "attack"


@dataclass
class MoveAnimation:
    """
    Visual catch-up for a move that has already happened logically.

    The presentation layer advances it every frame and draws the unit at
    `position`; nothing in the simulation waits on it.
    """
    unit: "PhysicalUnit"
    start: Tuple[int, int]
    end: Tuple[int, int]
    duration: float
    elapsed: float = 0.0
    cancelled: bool = False

    @property
    def progress(self) -> float:
        if self.cancelled or self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    @property
    def done(self) -> bool:
        return self.progress >= 1.0

    @property
    def position(self) -> Tuple[float, float]:
        """Interpolated grid position."""
        t = self.progress
        sx, sy = self.start
        ex, ey = self.end
        return sx + (ex - sx) * t, sy + (ey - sy) * t

    def advance(self, dt: float) -> None:
        self.elapsed += max(0.0, dt)

    def cancel(self) -> None:
        self.cancelled = True


class WorldObserver:
    """
    Notifications emitted by the World.

    All hooks are fire-and-forget no-ops; subclasses override what they
    care about.
    """

    def on_selection_changed(self, player_id: int, unit: "Character") -> None:
        pass

    def on_highlights_cleared(self) -> None:
        pass

    def on_action_highlight(self, cells: List[Tuple[int, int]], kind: HighlightKind) -> None:
        pass

    def on_unit_changed(self, unit: "Character") -> None:
        pass

    def on_unit_died(self, unit: "Character") -> None:
        pass

    def on_dialogue(self, speaker: Optional["Character"], text: str, choices: List[str]) -> None:
        pass

    def on_turn_ended(self, turn_number: int) -> None:
        pass
