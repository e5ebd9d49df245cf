# systems/events.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from engine.error_handler import MapDataError

if TYPE_CHECKING:
    from engine.battle.world import World
    from world.entities import Character
    from world.map_data import MapRecord


class GridEventKind(str, Enum):
    SPEAK = "speak"
    WIN = "win"


@dataclass(frozen=True)
class GridEvent:
    """
    A scripted trigger bound to a tile.

    Fires every time a friendly unit steps onto (x, y); events are never
    consumed.
    """
    x: int
    y: int
    kind: GridEventKind
    text: str = ""

    def matches(self, x: int, y: int) -> bool:
        return self.x == x and self.y == y

    @classmethod
    def from_record(cls, record: "MapRecord") -> "GridEvent":
        raw_kind = str(record.get("grid-event-type", "")).lower()
        try:
            kind = GridEventKind(raw_kind)
        except ValueError as e:
            raise MapDataError(f"Unknown grid-event-type {raw_kind!r} at ({record.x}, {record.y})") from e
        return cls(x=record.x, y=record.y, kind=kind, text=str(record.get("text", "")))


@dataclass
class EventResult:
    text: str
    choices: List[str] = field(default_factory=list)
    victory: bool = False


EventHandler = Callable[["World", GridEvent, "Character"], EventResult]

# Registry
EVENT_HANDLERS: Dict[GridEventKind, EventHandler] = {}


def register(kind: GridEventKind, handler: EventHandler) -> None:
    EVENT_HANDLERS[kind] = handler


def get_handler(kind: GridEventKind) -> Optional[EventHandler]:
    return EVENT_HANDLERS.get(kind)


# -------------------------------------------------------------
# Event handlers
# -------------------------------------------------------------

def speak_handler(world: "World", event: GridEvent, unit: "Character") -> EventResult:
    return EventResult(text=event.text)


def win_handler(world: "World", event: GridEvent, unit: "Character") -> EventResult:
    """
    Level exit: report how many of the crew made it.
    """
    survivors = len(world.players)
    summary = f"{survivors} of {world.initial_player_count} survived."
    text = f"{event.text}\n{summary}" if event.text else summary
    return EventResult(text=text, victory=True)


register(GridEventKind.SPEAK, speak_handler)
register(GridEventKind.WIN, win_handler)
