"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os

# Headless pygame: no window, no audio device.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest
import pygame
from typing import Generator


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    pygame.display.set_mode((800, 600), pygame.HIDDEN)
    yield
    pygame.quit()


@pytest.fixture
def sample_screen() -> pygame.Surface:
    """
    Create a sample pygame surface for tests that need a screen.
    """
    return pygame.Surface((800, 600))


@pytest.fixture
def open_grid():
    """
    A 10x10 grid with no walls.
    """
    from world.grid import Grid
    return Grid(10, 10)


@pytest.fixture
def game_config():
    """
    A config with animations off so moves leave no pending animation.
    """
    from engine.config import GameConfig
    config = GameConfig()
    config.animate_moves = False
    return config


@pytest.fixture
def make_world(game_config):
    """
    Factory building a World from compact unit/event descriptions.

    players:  [(x, y, name, hp, ap), ...]
    hostiles: [(x, y, hp, ap), ...]
    events:   [(x, y, kind, text), ...]
    blocked:  [(x, y), ...] wall tiles
    """
    from engine.battle.world import World
    from world.grid import Grid
    from world.map_data import MapRecord, RecordKind

    def _make(
        players=((0, 0, "Captain", 3, 3),),
        hostiles=(),
        events=(),
        blocked=(),
        width=10,
        height=10,
        observers=(),
        config=None,
        telemetry_logger=None,
    ):
        walls = set(blocked)
        grid = Grid(width, height, lambda x, y: (x, y) in walls)
        records = []
        for x, y, name, hp, ap in players:
            records.append(MapRecord(x, y, RecordKind.PC_SPAWN, "pc-1", {"name": name, "hp": hp, "ap": ap}))
        for x, y, hp, ap in hostiles:
            records.append(MapRecord(x, y, RecordKind.HOSTILE_SPAWN, "bad-1", {"hp": hp, "ap": ap}))
        for x, y, kind, text in events:
            records.append(MapRecord(x, y, RecordKind.GRID_EVENT, "event", {"grid-event-type": kind, "text": text}))
        return World(
            grid,
            records,
            observers=observers,
            config=config or game_config,
            telemetry_logger=telemetry_logger,
        )

    return _make


@pytest.fixture
def recorder():
    """
    A WorldObserver that records every notification as (hook, args).
    """
    from engine.battle.types import WorldObserver

    class Recorder(WorldObserver):
        def __init__(self):
            self.calls = []

        def named(self, hook):
            return [args for name, args in self.calls if name == hook]

        def on_selection_changed(self, player_id, unit):
            self.calls.append(("selection_changed", (player_id, unit)))

        def on_highlights_cleared(self):
            self.calls.append(("highlights_cleared", ()))

        def on_action_highlight(self, cells, kind):
            self.calls.append(("action_highlight", (list(cells), kind)))

        def on_unit_changed(self, unit):
            self.calls.append(("unit_changed", (unit,)))

        def on_unit_died(self, unit):
            self.calls.append(("unit_died", (unit,)))

        def on_dialogue(self, speaker, text, choices):
            self.calls.append(("dialogue", (speaker, text, list(choices))))

        def on_turn_ended(self, turn_number):
            self.calls.append(("turn_ended", (turn_number,)))

    return Recorder()
