"""
Battle renderer module.

Handles all rendering/drawing for the battle scene. Reads the scene's view
state (camera, highlights, dialogue) and the world's units; never mutates
either.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import pygame

from engine.battle.types import HighlightKind
from settings import (
    COLOR_BG,
    COLOR_ENEMY,
    COLOR_FLOOR,
    COLOR_GRID_LINE,
    COLOR_HIGHLIGHT_ATTACK,
    COLOR_HIGHLIGHT_MOVE,
    COLOR_HIGHLIGHT_SELECTED,
    COLOR_NEUTRAL,
    COLOR_PANEL,
    COLOR_PANEL_OUTLINE,
    COLOR_PLAYER,
    COLOR_TEXT,
    COLOR_WALL,
    TITLE,
)
from world.entities import Character, Control, PhysicalUnit

if TYPE_CHECKING:
    from engine.scenes.battle_scene import BattleScene

_HIGHLIGHT_COLORS = {
    HighlightKind.SELECTED: COLOR_HIGHLIGHT_SELECTED,
    HighlightKind.MOVE: COLOR_HIGHLIGHT_MOVE,
    HighlightKind.ATTACK: COLOR_HIGHLIGHT_ATTACK,
}

_CONTROL_COLORS = {
    Control.FRIENDLY: COLOR_PLAYER,
    Control.HOSTILE: COLOR_ENEMY,
    Control.NEUTRAL: COLOR_NEUTRAL,
}


def wrap_text(text: str, font: pygame.font.Font, max_width: int) -> List[str]:
    """Greedy word wrap; explicit newlines are kept."""
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}".strip()
            if current and font.size(candidate)[0] > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


class BattleRenderer:
    """
    Handles all rendering for the battle scene.

    Takes a reference to the BattleScene to access its state.
    """

    def __init__(self, scene: "BattleScene") -> None:
        self.scene = scene
        self.font = scene.font
        self.small_font = scene.small_font

    @property
    def world(self):
        return self.scene.world

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(COLOR_BG)
        self.draw_grid(surface)
        self.draw_units(surface)
        self.draw_side_panel(surface)
        self.draw_dialogue(surface)
        self.draw_banner(surface)

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    def cell_rect(self, gx: float, gy: float) -> pygame.Rect:
        size = self.scene.cell_size
        return pygame.Rect(
            int(gx * size - self.scene.camera_x),
            int(gy * size - self.scene.camera_y),
            size,
            size,
        )

    def draw_grid(self, surface: pygame.Surface) -> None:
        """Draw terrain and action highlights."""
        view_w = self.scene.view_width
        size = self.scene.cell_size
        overlay = pygame.Surface((size, size), pygame.SRCALPHA)

        for cell in self.world.grid.cells():
            rect = self.cell_rect(cell.x, cell.y)
            if rect.right < 0 or rect.left > view_w:
                continue

            pygame.draw.rect(surface, COLOR_WALL if cell.collides() else COLOR_FLOOR, rect)

            kind = self.scene.highlights.get(cell.position)
            if kind is not None:
                overlay.fill((0, 0, 0, 0))
                pygame.draw.rect(overlay, _HIGHLIGHT_COLORS[kind], overlay.get_rect())
                surface.blit(overlay, rect.topleft)

            pygame.draw.rect(surface, COLOR_GRID_LINE, rect, width=1)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def _display_positions(self) -> Dict[int, Tuple[float, float]]:
        # Later animations of the same unit win.
        return {id(a.unit): a.position for a in self.world.animations if not a.done}

    def draw_units(self, surface: pygame.Surface) -> None:
        """Draw all units, interpolating any that are still animating."""
        positions = self._display_positions()
        selected = self.world.get_selected_player()

        for unit in self.world.units:
            if not unit.is_visible or unit.cell is None:
                continue
            gx, gy = positions.get(id(unit), unit.position)
            rect = self.cell_rect(gx, gy)
            if rect.right < 0 or rect.left > self.scene.view_width:
                continue
            self.draw_unit(surface, rect, unit, is_selected=unit is selected)

    def draw_unit(self, surface: pygame.Surface, rect: pygame.Rect, unit: PhysicalUnit, *, is_selected: bool) -> None:
        color = _CONTROL_COLORS[unit.control]
        radius = rect.width // 2 - 3
        pygame.draw.circle(surface, color, rect.center, radius)
        if is_selected:
            pygame.draw.circle(surface, COLOR_PANEL_OUTLINE, rect.center, radius + 2, width=2)

        # Facing tick
        cx, cy = rect.center
        tip = (cx + int(math.cos(unit.facing) * radius), cy + int(math.sin(unit.facing) * radius))
        pygame.draw.line(surface, COLOR_WALL, rect.center, tip, 2)

        if isinstance(unit, Character):
            self.draw_hp_bar(surface, rect, unit)

    def draw_hp_bar(self, surface: pygame.Surface, rect: pygame.Rect, unit: Character) -> None:
        """Draw a small HP bar along the bottom of the unit's tile."""
        max_hp = unit.stats.max_hit_points
        if max_hp <= 0:
            return

        ratio = unit.stats.hit_points / float(max_hp)
        bar_height = 4
        bg_rect = pygame.Rect(rect.x + 2, rect.bottom - bar_height - 1, rect.width - 4, bar_height)
        pygame.draw.rect(surface, (25, 25, 32), bg_rect)

        if ratio <= 0.0:
            return

        fg_rect = pygame.Rect(bg_rect.x, bg_rect.y, max(1, int(bg_rect.width * ratio)), bar_height)
        pygame.draw.rect(surface, _CONTROL_COLORS[unit.control], fg_rect)

    # ------------------------------------------------------------------
    # Side panel
    # ------------------------------------------------------------------

    def draw_side_panel(self, surface: pygame.Surface) -> None:
        """Roster with HP/AP, turn counter, recent log and the End Turn button."""
        panel = self.scene.panel_rect
        pygame.draw.rect(surface, COLOR_PANEL, panel)
        pygame.draw.rect(surface, COLOR_PANEL_OUTLINE, panel, width=1)

        x = panel.x + 10
        y = panel.y + 10
        surface.blit(self.font.render(TITLE, True, COLOR_TEXT), (x, y))
        y += 28
        phase = self.world.phase.value.upper()
        surface.blit(self.small_font.render(f"Turn {self.world.turn_number} ({phase})", True, COLOR_TEXT), (x, y))
        y += 24

        selected_id = self.world.get_selected_player_id()
        for index, player in enumerate(self.world.players):
            row = pygame.Rect(panel.x + 6, y - 2, panel.width - 12, 40)
            if index == selected_id:
                pygame.draw.rect(surface, COLOR_HIGHLIGHT_SELECTED[:3], row, width=1)
            name = self.small_font.render(f"{index + 1}. {player.name}", True, COLOR_TEXT)
            stats = self.small_font.render(
                f"HP {player.stats.hit_points}/{player.stats.max_hit_points}  "
                f"AP {player.stats.action_points}/{player.stats.max_action_points}",
                True,
                COLOR_PLAYER,
            )
            surface.blit(name, (x, y))
            surface.blit(stats, (x, y + 18))
            y += 44

        y += 6
        for line, color in self.scene.message_log.recent(8):
            surface.blit(self.small_font.render(line, True, color or COLOR_TEXT), (x, y))
            y += 16

        button = self.scene.end_turn_rect
        pygame.draw.rect(surface, (170, 170, 170), button)
        pygame.draw.rect(surface, (204, 204, 204), button, width=1)
        label = self.font.render("End Turn", True, COLOR_WALL)
        surface.blit(label, label.get_rect(center=button.center))

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------

    def draw_dialogue(self, surface: pygame.Surface) -> None:
        dialogue = self.scene.dialogue
        if dialogue is None:
            return

        width = min(420, self.scene.view_width - 20)
        lines = wrap_text(dialogue.text, self.small_font, width - 20)
        if dialogue.speaker:
            lines.insert(0, f"{dialogue.speaker}:")
        lines.extend(f"> {choice}" for choice in dialogue.choices)
        lines.append("(click or Enter to continue)")

        line_h = self.small_font.get_linesize()
        height = line_h * len(lines) + 20
        box = pygame.Rect(10, surface.get_height() - height - 10, width, height)
        pygame.draw.rect(surface, (255, 255, 255), box)
        pygame.draw.rect(surface, (0, 255, 0), box, width=1)
        for i, line in enumerate(lines):
            surface.blit(self.small_font.render(line, True, (0, 0, 0)), (box.x + 10, box.y + 10 + i * line_h))

    def draw_banner(self, surface: pygame.Surface) -> None:
        text: Optional[str] = None
        if self.world.won:
            text = "VICTORY"
        elif self.world.is_defeated:
            text = "ALL CREW LOST"
        if text is None:
            return
        label = self.font.render(text, True, COLOR_TEXT)
        rect = label.get_rect(center=(self.scene.view_width // 2, 30))
        pygame.draw.rect(surface, COLOR_PANEL, rect.inflate(24, 12))
        surface.blit(label, rect)
