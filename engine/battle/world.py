"""
Turn controller.

The World owns the grid, both rosters and the grid events, and drives the
turn state machine:

    PLAYER --end_turn()--> AI (runs to completion) --> PLAYER

Every mutation happens synchronously inside select_player, handle_click or
end_turn. Observers are told about selection, highlights, deaths and
dialogue; they never feed anything back into the simulation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from engine.battle.ai import AIController
from engine.battle.types import HighlightKind, MoveAnimation, TurnPhase, WorldObserver
from engine.config import GameConfig
from engine.error_handler import MapDataError, get_logger
from settings import (
    DEFAULT_HOSTILE_AP,
    DEFAULT_HOSTILE_HP,
    DEFAULT_HOSTILE_NAME,
    DEFAULT_HOSTILE_SPRITE,
    DEFAULT_PLAYER_SPRITE,
    MOVE_ANIMATION_SECONDS,
)
from systems.events import GridEvent, get_handler
from systems.stats import Statistics
from telemetry.logger import TelemetryLogger, telemetry
from world.actions import UnitAction, UnitActionType, get_unit_actions
from world.entities import Character, Control, PhysicalUnit
from world.grid import Cell, Grid
from world.map_data import MapRecord, RecordKind

if TYPE_CHECKING:
    from world.map_data import MapData

log = get_logger("world")


class World:
    """The game world: grid, rosters, grid events and whose turn it is."""

    def __init__(
        self,
        grid: Grid,
        records: Iterable[MapRecord] = (),
        *,
        observers: Sequence[WorldObserver] = (),
        config: Optional[GameConfig] = None,
        telemetry_logger: Optional[TelemetryLogger] = None,
    ) -> None:
        self.grid = grid
        self.config = config or GameConfig()
        self.telemetry = telemetry_logger or telemetry

        self.players: List[Character] = []
        self.hostiles: List[Character] = []
        self.grid_events: List[GridEvent] = []

        self.phase = TurnPhase.PLAYER
        self.turn_number = 1
        self.won = False
        self.animations: List[MoveAnimation] = []

        self._observers: List[WorldObserver] = list(observers)
        self._selected_player_id = 0
        self._player_actions: List[UnitAction] = []

        self.ai = AIController(
            self,
            visibility_range=self.config.ai_visibility_range,
            check_pathability=self.config.ai_checks_pathability,
        )

        self._load_records(records)
        self.initial_player_count = len(self.players)
        self.select_player(0)

    @classmethod
    def from_map(cls, map_data: "MapData", **kwargs) -> "World":
        grid = Grid(map_data.width, map_data.height, map_data.collides)
        return cls(grid, map_data.records, **kwargs)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, observer: WorldObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def _notify(self, hook: str, *args) -> None:
        for observer in list(self._observers):
            getattr(observer, hook)(*args)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_selected_player_id(self) -> int:
        return self._selected_player_id

    def get_selected_player(self) -> Optional[Character]:
        if 0 <= self._selected_player_id < len(self.players):
            return self.players[self._selected_player_id]
        return None

    @property
    def player_actions(self) -> List[UnitAction]:
        return list(self._player_actions)

    @property
    def units(self) -> List[Character]:
        return self.players + self.hostiles

    @property
    def is_defeated(self) -> bool:
        return not self.players

    @property
    def is_animating(self) -> bool:
        return any(not a.done for a in self.animations)

    def get_unit_actions(self, unit: PhysicalUnit) -> List[UnitAction]:
        """Legal moves and attacks for `unit` right now."""
        return get_unit_actions(self.grid, unit)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_player(self, player_id: int) -> bool:
        """Select the friendly unit at `player_id` and refresh its actions."""
        if not 0 <= player_id < len(self.players):
            log.debug("Ignoring selection of player %d (roster has %d)", player_id, len(self.players))
            return False

        self._selected_player_id = player_id
        player = self.players[player_id]
        self._notify("on_highlights_cleared")
        self._player_actions = self.get_unit_actions(player)
        self._notify("on_selection_changed", player_id, player)

        self._notify("on_action_highlight", [player.position], HighlightKind.SELECTED)
        moves = [a.position for a in self._player_actions if a.type is UnitActionType.MOVE]
        attacks = [a.position for a in self._player_actions if a.type is UnitActionType.ATTACK]
        if moves:
            self._notify("on_action_highlight", moves, HighlightKind.MOVE)
        if attacks:
            self._notify("on_action_highlight", attacks, HighlightKind.ATTACK)
        return True

    def select_next_player(self) -> bool:
        if not self.players:
            return False
        return self.select_player((self._selected_player_id + 1) % len(self.players))

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_click(self, grid_x: int, grid_y: int) -> bool:
        """
        Resolve a click on a grid coordinate.

        Clicking a friendly unit selects it; clicking the target of one of
        the selected unit's actions performs that action. Anything else is
        a no-op. Returns whether the click did something.
        """
        if self.phase is not TurnPhase.PLAYER:
            return False
        if self.config.block_input_while_animating and self.is_animating:
            return False

        for player_id, player in enumerate(self.players):
            if player.position == (grid_x, grid_y):
                return self.select_player(player_id)

        player = self.get_selected_player()
        if player is None:
            return False

        action = next((a for a in self._player_actions if a.position == (grid_x, grid_y)), None)
        if action is None:
            return False

        if action.type is UnitActionType.MOVE:
            cell = self.grid.get(grid_x, grid_y)
            done = cell is not None and self.perform_move(player, cell)
        else:
            done = self.perform_attack(player, action.target_unit)

        # Spending AP changes what's legal.
        self.select_player(self._selected_player_id)
        if done:
            self._notify("on_unit_changed", player)
        return done

    # ------------------------------------------------------------------
    # Action resolution (shared by player input and the AI)
    # ------------------------------------------------------------------

    def perform_move(self, unit: Character, cell: Cell) -> bool:
        start = unit.position
        if not unit.move_immediate(cell):
            log.debug("%s could not move to %s", unit, cell)
            return False

        if self.config.animate_moves and unit.is_visible:
            self.animations.append(MoveAnimation(unit, start, unit.position, MOVE_ANIMATION_SECONDS))
        self.telemetry.log("unit_moved", unit=unit.name, control=unit.control.value, start=start, end=unit.position)

        if unit.control is Control.FRIENDLY:
            self._check_grid_events(unit)
        return True

    def perform_attack(self, attacker: Character, target: Optional[Character]) -> bool:
        if target is None or target.cell is None:
            return False
        if not attacker.attack(target):
            log.debug("%s has no AP left to attack", attacker)
            return False

        log.info("%s attacks %s (%d HP left)", attacker.name, target.name, target.stats.hit_points)
        self.telemetry.log("unit_attacked", attacker=attacker.name, target=target.name, target_hp=target.stats.hit_points)
        if target.is_dead:
            self._kill(target)
        return True

    def _kill(self, unit: Character) -> None:
        unit.remove_from_grid()
        if unit in self.players:
            index = self.players.index(unit)
            self.players.remove(unit)
            # Keep pointing at the same survivor where possible.
            if index < self._selected_player_id:
                self._selected_player_id -= 1
            self._selected_player_id = max(0, min(self._selected_player_id, len(self.players) - 1))
        elif unit in self.hostiles:
            self.hostiles.remove(unit)

        log.info("%s has died", unit.name)
        self.telemetry.log("unit_died", unit=unit.name, control=unit.control.value)
        self._notify("on_unit_died", unit)

    def _check_grid_events(self, unit: Character) -> None:
        for event in self.grid_events:
            if not event.matches(unit.x, unit.y):
                continue
            handler = get_handler(event.kind)
            if handler is None:
                log.warning("No handler registered for grid event %s", event.kind.value)
                continue
            result = handler(self, event, unit)
            if result.victory:
                self.won = True
            self.telemetry.log("grid_event", kind=event.kind.value, x=event.x, y=event.y, unit=unit.name)
            self._notify("on_dialogue", unit, result.text, list(result.choices))

    # ------------------------------------------------------------------
    # Turn sequencing
    # ------------------------------------------------------------------

    def end_turn(self) -> bool:
        """Run the AI phase to completion, then start the next player phase."""
        if self.phase is not TurnPhase.PLAYER:
            return False

        log.info("--- END TURN %d ---", self.turn_number)
        self.phase = TurnPhase.AI
        self.ai.do_turn()

        for unit in self.units:
            unit.new_turn()

        self.phase = TurnPhase.PLAYER
        self.turn_number += 1
        self.telemetry.log(
            "turn_ended",
            turn=self.turn_number - 1,
            players=len(self.players),
            hostiles=len(self.hostiles),
        )
        self._notify("on_turn_ended", self.turn_number)

        if self.players:
            self.select_player(min(self._selected_player_id, len(self.players) - 1))
        else:
            self._player_actions = []
            self._notify("on_highlights_cleared")
        return True

    def game_loop_update(self, dt: float = 0.0) -> None:
        """Per-frame bookkeeping. Never mutates grid or unit state."""
        for animation in self.animations:
            animation.advance(dt)
        self.animations = [a for a in self.animations if not a.done]

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def spawn_player(self, x: int, y: int, name: str, hp: int, ap: int, sprite: str = DEFAULT_PLAYER_SPRITE) -> Character:
        player = Character(self._spawn_cell(x, y), name, _spawn_stats(name, hp, ap), Control.FRIENDLY, sprite)
        self.players.append(player)
        return player

    def spawn_hostile(
        self,
        x: int,
        y: int,
        name: str = DEFAULT_HOSTILE_NAME,
        hp: int = DEFAULT_HOSTILE_HP,
        ap: int = DEFAULT_HOSTILE_AP,
        sprite: str = DEFAULT_HOSTILE_SPRITE,
    ) -> Character:
        hostile = Character(self._spawn_cell(x, y), name, _spawn_stats(name, hp, ap), Control.HOSTILE, sprite)
        self.hostiles.append(hostile)
        return hostile

    def _spawn_cell(self, x: int, y: int) -> Cell:
        cell = self.grid.get(x, y)
        if cell is None:
            raise MapDataError(f"Spawn point ({x}, {y}) is outside the {self.grid.width}x{self.grid.height} grid")
        if cell.collides():
            log.warning("Spawning onto blocked tile (%d, %d)", x, y)
        return cell

    def _load_records(self, records: Iterable[MapRecord]) -> None:
        for record in records:
            try:
                if record.kind is RecordKind.PC_SPAWN:
                    self.spawn_player(
                        record.x,
                        record.y,
                        str(record.get("name", record.name)),
                        int(record.get("hp")),
                        int(record.get("ap")),
                        sprite=record.name or DEFAULT_PLAYER_SPRITE,
                    )
                elif record.kind is RecordKind.HOSTILE_SPAWN:
                    self.spawn_hostile(
                        record.x,
                        record.y,
                        str(record.get("name", DEFAULT_HOSTILE_NAME)),
                        int(record.get("hp", DEFAULT_HOSTILE_HP)),
                        int(record.get("ap", DEFAULT_HOSTILE_AP)),
                    )
                elif record.kind is RecordKind.GRID_EVENT:
                    if not self.grid.is_on_grid(record.x, record.y):
                        raise MapDataError(f"Grid event ({record.x}, {record.y}) is off the grid")
                    self.grid_events.append(GridEvent.from_record(record))
            except (TypeError, ValueError) as e:
                raise MapDataError(f"Bad {record.kind.value} record at ({record.x}, {record.y}): {e}") from e

        if not self.players:
            raise MapDataError("Map has no pc-spawn", user_message="This level has nobody to command.")
        log.info(
            "World loaded: %d players, %d hostiles, %d grid events",
            len(self.players),
            len(self.hostiles),
            len(self.grid_events),
        )


def _spawn_stats(name: str, hp: int, ap: int) -> Statistics:
    # A unit must enter the level alive.
    if hp <= 0:
        raise MapDataError(f"{name} would spawn with {hp} HP")
    return Statistics(hp, ap)
