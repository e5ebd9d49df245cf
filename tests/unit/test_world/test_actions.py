"""
Unit tests for action generation.
"""

from systems.stats import Statistics
from world.actions import UnitAction, UnitActionType, get_unit_actions
from world.entities import Character, Control, PhysicalUnit
from world.grid import Grid


def _char(grid, x, y, control=Control.FRIENDLY, hp=3, ap=3):
    return Character(grid.get(x, y), "Unit", Statistics(hp, ap), control)


class TestGetUnitActions:

    def test_open_ground_offers_eight_moves(self, open_grid):
        unit = _char(open_grid, 5, 5)
        actions = get_unit_actions(open_grid, unit)
        assert [a.position for a in actions] == [
            (4, 4), (5, 4), (6, 4),
            (4, 5), (6, 5),
            (4, 6), (5, 6), (6, 6),
        ]
        assert all(a.type is UnitActionType.MOVE for a in actions)

    def test_corner(self, open_grid):
        unit = _char(open_grid, 0, 0)
        assert [a.position for a in get_unit_actions(open_grid, unit)] == [(1, 0), (0, 1), (1, 1)]

    def test_no_action_points(self, open_grid):
        unit = _char(open_grid, 5, 5, ap=0)
        assert get_unit_actions(open_grid, unit) == []

    def test_dead_unit_gets_nothing(self, open_grid):
        """A dead unit with AP left is offered no moves or attacks."""
        unit = _char(open_grid, 5, 5, hp=0)
        _char(open_grid, 6, 5, Control.HOSTILE)
        assert unit.stats.is_dead
        assert get_unit_actions(open_grid, unit) == []

    def test_units_without_stats_get_nothing(self, open_grid):
        marker = PhysicalUnit(open_grid.get(5, 5), Control.FRIENDLY)
        assert get_unit_actions(open_grid, marker) == []

    def test_off_grid_unit_gets_nothing(self, open_grid):
        unit = _char(open_grid, 5, 5)
        unit.remove_from_grid()
        assert get_unit_actions(open_grid, unit) == []

    def test_attack_instead_of_move(self, open_grid):
        """An occupied hostile cell yields exactly one attack, no move."""
        unit = _char(open_grid, 5, 5)
        hostile = _char(open_grid, 6, 5, Control.HOSTILE)
        actions = [a for a in get_unit_actions(open_grid, unit) if a.position == (6, 5)]
        assert len(actions) == 1
        assert actions[0].type is UnitActionType.ATTACK
        assert actions[0].target_unit is hostile

    def test_walls_and_allies_offer_nothing(self):
        walls = {(1, 0)}
        grid = Grid(3, 3, lambda x, y: (x, y) in walls)
        unit = _char(grid, 1, 1)
        _char(grid, 0, 1)
        positions = [a.position for a in get_unit_actions(grid, unit)]
        assert (1, 0) not in positions
        assert (0, 1) not in positions
        assert len(positions) == 6

    def test_neutral_blocks_but_is_not_attackable(self, open_grid):
        unit = _char(open_grid, 5, 5)
        _char(open_grid, 5, 6, Control.NEUTRAL)
        positions = [a.position for a in get_unit_actions(open_grid, unit)]
        assert (5, 6) not in positions

    def test_hostile_sees_friendly_as_target(self, open_grid):
        hostile = _char(open_grid, 2, 2, Control.HOSTILE)
        _char(open_grid, 3, 3)
        attacks = [a for a in get_unit_actions(open_grid, hostile) if a.type is UnitActionType.ATTACK]
        assert [a.position for a in attacks] == [(3, 3)]

    def test_actions_compare_by_type_and_position(self, open_grid):
        target = _char(open_grid, 1, 1, Control.HOSTILE)
        assert UnitAction(UnitActionType.ATTACK, (1, 1), target) == UnitAction(UnitActionType.ATTACK, (1, 1))
