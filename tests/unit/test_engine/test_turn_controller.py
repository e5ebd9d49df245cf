"""
Unit tests for the turn controller (World).
"""

import pytest

from engine.battle.types import HighlightKind, TurnPhase
from engine.battle.world import World
from engine.config import GameConfig
from engine.error_handler import MapDataError
from settings import DEFAULT_MAP_PATH
from world.actions import UnitActionType
from world.grid import Grid
from world.map_data import MapRecord, RecordKind, load_map


class TestLoading:
    """Building a World from map records."""

    def test_rosters(self, make_world):
        world = make_world(
            players=[(0, 0, "Captain", 5, 3), (1, 0, "Medic", 3, 4)],
            hostiles=[(5, 5, 3, 2)],
            events=[(2, 2, "speak", "Hi")],
        )
        assert [p.name for p in world.players] == ["Captain", "Medic"]
        assert world.players[0].stats.max_hit_points == 5
        assert world.players[1].stats.max_action_points == 4
        assert len(world.hostiles) == 1
        assert len(world.grid_events) == 1
        assert world.initial_player_count == 2

    def test_hostile_defaults(self, game_config):
        grid = Grid(5, 5)
        records = [
            MapRecord(0, 0, RecordKind.PC_SPAWN, "pc-1", {"name": "Captain", "hp": 3, "ap": 3}),
            MapRecord(4, 4, RecordKind.HOSTILE_SPAWN, "bad-1"),
        ]
        hostile = World(grid, records, config=game_config).hostiles[0]
        assert hostile.name == "Zombie"
        assert hostile.sprite == "npc"
        assert hostile.stats.max_hit_points == 3
        assert hostile.stats.max_action_points == 3

    def test_no_players(self, make_world):
        with pytest.raises(MapDataError):
            make_world(players=[])

    def test_spawn_off_grid(self, make_world):
        with pytest.raises(MapDataError):
            make_world(players=[(20, 20, "Lost", 3, 3)])

    def test_player_spawned_dead(self, make_world):
        with pytest.raises(MapDataError):
            make_world(players=[(2, 2, "Ghost", 0, 3), (5, 5, "Captain", 3, 3)])

    def test_hostile_spawned_dead(self, make_world):
        with pytest.raises(MapDataError):
            make_world(hostiles=[(4, 4, 0, 3)])

    def test_bad_stat_values(self, game_config):
        records = [MapRecord(0, 0, RecordKind.PC_SPAWN, "pc-1", {"name": "Captain", "hp": "lots", "ap": 3})]
        with pytest.raises(MapDataError):
            World(Grid(3, 3), records, config=game_config)

    def test_missing_player_stats(self, game_config):
        records = [MapRecord(0, 0, RecordKind.PC_SPAWN, "pc-1", {"name": "Captain"})]
        with pytest.raises(MapDataError):
            World(Grid(3, 3), records, config=game_config)

    def test_unknown_event_kind(self, make_world):
        with pytest.raises(MapDataError):
            make_world(events=[(2, 2, "teleport", "")])

    def test_from_bundled_map(self, game_config):
        world = World.from_map(load_map(DEFAULT_MAP_PATH), config=game_config)
        assert len(world.players) == 3
        assert len(world.hostiles) == 3
        assert len(world.grid_events) == 3
        assert world.hostiles[0].name == "Zombie"
        assert world.hostiles[2].name == "Ghoul"
        assert not world.grid.is_on_grid(20, 0)
        assert world.grid.get(0, 0).collides()


class TestSelection:

    def test_first_player_selected(self, make_world):
        world = make_world()
        assert world.get_selected_player_id() == 0
        assert world.get_selected_player() is world.players[0]
        assert len(world.player_actions) == 3

    def test_highlights(self, make_world, recorder):
        make_world(players=[(0, 0, "Captain", 3, 3)], hostiles=[(1, 1, 3, 3)], observers=[recorder])
        assert recorder.calls[0] == ("highlights_cleared", ())
        highlights = recorder.named("action_highlight")
        assert highlights[0] == ([(0, 0)], HighlightKind.SELECTED)
        assert highlights[1] == ([(1, 0), (0, 1)], HighlightKind.MOVE)
        assert highlights[2] == ([(1, 1)], HighlightKind.ATTACK)

    def test_invalid_selection_ignored(self, make_world, recorder):
        world = make_world(observers=[recorder])
        recorder.calls.clear()
        assert world.select_player(5) is False
        assert world.select_player(-1) is False
        assert world.get_selected_player_id() == 0
        assert recorder.calls == []

    def test_select_next_cycles(self, make_world):
        world = make_world(players=[(0, 0, "A", 3, 3), (5, 5, "B", 3, 3)])
        assert world.select_next_player()
        assert world.get_selected_player().name == "B"
        assert world.select_next_player()
        assert world.get_selected_player().name == "A"

    def test_click_friendly_selects(self, make_world):
        world = make_world(players=[(0, 0, "A", 3, 3), (5, 5, "B", 3, 3)])
        assert world.handle_click(5, 5)
        assert world.get_selected_player_id() == 1
        assert world.players[1].stats.action_points == 3


class TestClicks:

    def test_move(self, make_world, recorder):
        world = make_world(observers=[recorder])
        player = world.players[0]
        assert world.handle_click(1, 0)
        assert player.position == (1, 0)
        assert player.stats.action_points == 2
        assert recorder.named("unit_changed") == [(player,)]
        assert (0, 0) in [a.position for a in world.player_actions]

    def test_click_outside_actions_is_noop(self, make_world):
        world = make_world()
        assert world.handle_click(5, 5) is False
        assert world.handle_click(-1, -1) is False
        assert world.players[0].position == (0, 0)
        assert world.players[0].stats.action_points == 3

    def test_actions_run_out(self, make_world):
        world = make_world(players=[(0, 0, "Captain", 3, 1)])
        assert world.handle_click(1, 0)
        assert world.player_actions == []
        assert world.handle_click(2, 0) is False
        assert world.players[0].position == (1, 0)

    def test_attack_kills(self, make_world, recorder):
        world = make_world(
            players=[(1, 1, "Captain", 3, 1)],
            hostiles=[(1, 2, 1, 3)],
            observers=[recorder],
        )
        hostile = world.hostiles[0]
        attacks = [a for a in world.player_actions if a.type is UnitActionType.ATTACK]
        assert [a.position for a in attacks] == [(1, 2)]

        assert world.handle_click(1, 2)
        assert world.players[0].stats.action_points == 0
        assert hostile.stats.hit_points == 0
        assert world.hostiles == []
        assert world.grid.get(1, 2).units == ()
        assert recorder.named("unit_died") == [(hostile,)]
        assert world.player_actions == []

    def test_attack_wounds(self, make_world):
        world = make_world(players=[(1, 1, "Captain", 3, 3)], hostiles=[(2, 1, 3, 3)])
        assert world.handle_click(2, 1)
        assert world.hostiles[0].stats.hit_points == 2
        assert world.players[0].position == (1, 1)

    def test_no_input_outside_player_phase(self, make_world):
        world = make_world()
        world.phase = TurnPhase.AI
        assert world.handle_click(1, 0) is False
        assert world.end_turn() is False
        assert world.players[0].position == (0, 0)


class TestGridEvents:

    def test_speak_fires_every_entry(self, make_world, recorder):
        world = make_world(
            players=[(1, 1, "Captain", 3, 5)],
            events=[(2, 2, "speak", "Hi")],
            observers=[recorder],
        )
        player = world.players[0]
        world.handle_click(2, 2)
        assert recorder.named("dialogue") == [(player, "Hi", [])]
        world.handle_click(1, 1)
        assert len(recorder.named("dialogue")) == 1
        world.handle_click(2, 2)
        assert len(recorder.named("dialogue")) == 2
        assert len(world.grid_events) == 1

    def test_win(self, make_world, recorder):
        world = make_world(
            players=[(0, 0, "Captain", 3, 3), (5, 5, "Medic", 3, 3)],
            events=[(1, 0, "win", "Out.")],
            observers=[recorder],
        )
        assert not world.won
        world.handle_click(1, 0)
        assert world.won
        assert recorder.named("dialogue")[-1][1] == "Out.\n2 of 2 survived."

    def test_hostiles_do_not_trigger_events(self, make_world, recorder):
        world = make_world(
            players=[(0, 0, "Captain", 3, 3)],
            hostiles=[(3, 0, 3, 1)],
            events=[(2, 0, "speak", "Boo")],
            observers=[recorder],
        )
        world.end_turn()
        assert world.hostiles[0].position == (2, 0)
        assert recorder.named("dialogue") == []


class TestEndTurn:

    def test_turn_cycle(self, make_world, recorder):
        world = make_world(hostiles=[(5, 0, 3, 2)], observers=[recorder])
        player = world.players[0]
        world.handle_click(0, 1)
        assert player.stats.action_points == 2

        assert world.end_turn()
        assert world.phase is TurnPhase.PLAYER
        assert world.turn_number == 2
        assert player.stats.action_points == 3
        assert world.hostiles[0].position == (3, 1)
        assert world.hostiles[0].stats.action_points == 2
        assert recorder.named("turn_ended") == [(2,)]
        assert recorder.named("selection_changed")[-1] == (0, player)

    def test_selected_survivor_kept_when_earlier_player_dies(self, make_world):
        world = make_world(
            players=[(0, 0, "A", 1, 3), (5, 5, "B", 5, 3)],
            hostiles=[(1, 0, 3, 1)],
        )
        world.select_player(1)
        world.end_turn()
        assert [p.name for p in world.players] == ["B"]
        assert world.get_selected_player_id() == 0
        assert world.get_selected_player().name == "B"

    def test_defeat(self, make_world, recorder):
        world = make_world(players=[(0, 0, "A", 1, 3)], hostiles=[(1, 0, 3, 3)], observers=[recorder])
        world.end_turn()
        assert world.is_defeated
        assert world.get_selected_player() is None
        assert world.player_actions == []
        assert world.handle_click(1, 1) is False
        assert recorder.calls[-1] == ("highlights_cleared", ())


class TestAnimation:

    def _config(self, block=False):
        config = GameConfig()
        config.animate_moves = True
        config.block_input_while_animating = block
        return config

    def test_move_queues_animation(self, make_world):
        world = make_world(config=self._config())
        world.handle_click(1, 0)
        assert world.is_animating
        assert world.animations[0].start == (0, 0)
        assert world.animations[0].end == (1, 0)
        # The logical move already happened.
        assert world.players[0].position == (1, 0)

        world.game_loop_update(1.0)
        assert not world.is_animating
        assert world.animations == []

    def test_input_not_blocked_by_default(self, make_world):
        world = make_world(config=self._config())
        world.handle_click(1, 0)
        assert world.handle_click(2, 0)
        assert world.players[0].position == (2, 0)

    def test_input_blocked_while_animating(self, make_world):
        world = make_world(config=self._config(block=True))
        world.handle_click(1, 0)
        assert world.handle_click(2, 0) is False
        world.game_loop_update(1.0)
        assert world.handle_click(2, 0)

    def test_update_never_mutates_units(self, make_world):
        world = make_world(config=self._config())
        world.handle_click(1, 0)
        player = world.players[0]
        before = (player.position, player.stats.action_points, player.stats.hit_points)
        for _ in range(10):
            world.game_loop_update(0.05)
        assert (player.position, player.stats.action_points, player.stats.hit_points) == before
