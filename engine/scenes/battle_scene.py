"""
pygame front end for a World.

The scene is a WorldObserver: it mirrors highlights, deaths and dialogue
into view state, and turns mouse clicks and key presses into World calls
with resolved grid coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pygame

from engine.battle.renderer import BattleRenderer
from engine.battle.types import HighlightKind, WorldObserver
from engine.battle.world import World
from engine.controllers.input import SELECT_INDICES, STEP_DELTAS, create_default_input_manager
from engine.message_log import COLOR_DEATH, COLOR_DIALOGUE, COLOR_TURN, MessageLog
from settings import MESSAGE_LOG_SIZE, SIDE_PANEL_WIDTH, TILE_SIZE
from systems.input import InputAction, InputManager
from world.entities import Character


@dataclass
class Dialogue:
    speaker: str
    text: str
    choices: List[str] = field(default_factory=list)


class BattleScene(WorldObserver):
    def __init__(
        self,
        screen: pygame.Surface,
        world: World,
        input_manager: Optional[InputManager] = None,
    ) -> None:
        self.screen = screen
        self.world = world
        self.input_manager = input_manager or create_default_input_manager()
        self.message_log = MessageLog(MESSAGE_LOG_SIZE)

        self.cell_size = TILE_SIZE
        self.camera_x = 0.0
        self.camera_y = 0.0
        self.highlights: Dict[Tuple[int, int], HighlightKind] = {}
        self.dialogue: Optional[Dialogue] = None

        self.font = pygame.font.Font(None, 24)
        self.small_font = pygame.font.Font(None, 18)
        self.renderer = BattleRenderer(self)

        world.add_observer(self)
        # Pick up the selection the world made before we were listening.
        world.select_player(world.get_selected_player_id())

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def view_width(self) -> int:
        return max(0, self.screen.get_width() - SIDE_PANEL_WIDTH)

    @property
    def panel_rect(self) -> pygame.Rect:
        return pygame.Rect(self.view_width, 0, SIDE_PANEL_WIDTH, self.screen.get_height())

    @property
    def end_turn_rect(self) -> pygame.Rect:
        panel = self.panel_rect
        return pygame.Rect(panel.x + 10, panel.bottom - 70, panel.width - 20, 60)

    def center_camera_on(self, gx: int, gy: int) -> None:
        size = self.cell_size
        max_x = max(0, self.world.grid.width * size - self.view_width)
        max_y = max(0, self.world.grid.height * size - self.screen.get_height())
        self.camera_x = min(max(0, gx * size + size / 2 - self.view_width / 2), max_x)
        self.camera_y = min(max(0, gy * size + size / 2 - self.screen.get_height() / 2), max_y)

    def screen_to_grid(self, px: int, py: int) -> Optional[Tuple[int, int]]:
        """Grid coordinate under a screen pixel, or None outside the map view."""
        if px < 0 or px >= self.view_width:
            return None
        gx = int((px + self.camera_x) // self.cell_size)
        gy = int((py + self.camera_y) // self.cell_size)
        if not self.world.grid.is_on_grid(gx, gy):
            return None
        return gx, gy

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Returns True if the event was consumed."""
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 0) == 1:
            return self.handle_mouse(event.pos)
        if event.type in (pygame.KEYDOWN, pygame.KEYUP):
            for action in self.input_manager.process_event(event):
                if self.handle_action(action):
                    return True
        return False

    def handle_mouse(self, pos: Tuple[int, int]) -> bool:
        if self.dialogue is not None:
            self.dialogue = None
            return True
        if self.end_turn_rect.collidepoint(pos):
            return self.world.end_turn()
        cell = self.screen_to_grid(*pos)
        if cell is None:
            return False
        return self.world.handle_click(*cell)

    def handle_action(self, action: InputAction) -> bool:
        if self.dialogue is not None:
            # Dialogue swallows keys until dismissed.
            if action is InputAction.CONFIRM:
                self.dialogue = None
            return True

        if action in STEP_DELTAS:
            player = self.world.get_selected_player()
            if player is None:
                return False
            dx, dy = STEP_DELTAS[action]
            return self.world.handle_click(player.x + dx, player.y + dy)
        if action in SELECT_INDICES:
            return self.world.select_player(SELECT_INDICES[action])
        if action is InputAction.SELECT_NEXT:
            return self.world.select_next_player()
        if action is InputAction.END_TURN:
            return self.world.end_turn()
        return False

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        self.world.game_loop_update(dt)

    def draw(self) -> None:
        self.renderer.draw(self.screen)

    # ------------------------------------------------------------------
    # WorldObserver
    # ------------------------------------------------------------------

    def on_selection_changed(self, player_id: int, unit: Character) -> None:
        self.center_camera_on(unit.x, unit.y)

    def on_highlights_cleared(self) -> None:
        self.highlights.clear()

    def on_action_highlight(self, cells: List[Tuple[int, int]], kind: HighlightKind) -> None:
        for cell in cells:
            self.highlights[cell] = kind

    def on_unit_died(self, unit: Character) -> None:
        self.message_log.add_message(f"{unit.name} has died.", COLOR_DEATH)

    def on_dialogue(self, speaker: Optional[Character], text: str, choices: List[str]) -> None:
        name = speaker.name if speaker is not None else ""
        self.dialogue = Dialogue(name, text, list(choices))
        self.message_log.add_message(f"{name}: {text}" if name else text, COLOR_DIALOGUE)

    def on_turn_ended(self, turn_number: int) -> None:
        self.message_log.add_message(f"Turn {turn_number}", COLOR_TURN)
