"""
Unit tests for the board model: placements, constraints and regions.
"""
import pytest

from domino_sets import Domino
from grid import (
    Constraint, ConstraintType, Orientation, PlacedDomino, Puzzle,
    board_size, cell_key, connected_components, empty_board, find_display_cell,
    find_regions, placement_values,
)


class TestPlacedDomino:

    def test_horizontal_cells(self):
        p = PlacedDomino(Domino(1, 2), 3, 4, Orientation.HORIZONTAL)
        assert p.cells() == ((3, 4), (3, 5))

    def test_vertical_cells(self):
        p = PlacedDomino(Domino(1, 2), 3, 4, Orientation.VERTICAL)
        assert p.cells() == ((3, 4), (4, 4))

    def test_first_pip_sits_on_anchor(self):
        p = PlacedDomino(Domino(5, 0), 0, 0, Orientation.VERTICAL)
        assert p.cell_values() == (((0, 0), 5), ((1, 0), 0))

    def test_placement_values(self):
        placed = [
            PlacedDomino(Domino(1, 2), 0, 0, Orientation.HORIZONTAL),
            PlacedDomino(Domino(6, 3), 1, 0, Orientation.HORIZONTAL),
        ]
        assert placement_values(placed) == {(0, 0): 1, (0, 1): 2, (1, 0): 6, (1, 1): 3}


class TestConstraint:

    @pytest.mark.parametrize("constraint, values, expected", [
        (Constraint.equal(), [3, 3, 3], True),
        (Constraint.equal(), [3, 4], False),
        (Constraint.not_equal(), [3, 4], True),
        (Constraint.not_equal(), [2, 2], False),
        (Constraint.sum(9), [4, 3, 2], True),
        (Constraint.sum(9), [4, 3, 1], False),
        (Constraint.less_than(5), [1, 3], True),
        (Constraint.less_than(5), [2, 3], False),
        (Constraint.greater_than(10), [6, 5], True),
        (Constraint.greater_than(10), [6, 4], False),
    ])
    def test_is_satisfied(self, constraint, values, expected):
        assert constraint.is_satisfied(values) is expected

    def test_labels(self):
        assert Constraint.equal().label() == '='
        assert Constraint.not_equal().label() == '!='
        assert Constraint.less_than(4).label() == '<4'
        assert Constraint.greater_than(8).label() == '>8'
        assert Constraint.sum(12).label() == '12'

    def test_factories_set_type(self):
        assert Constraint.sum(3).type == ConstraintType.SUM
        assert Constraint.equal().target is None


class TestRegions:

    def test_display_cell_is_bottom_then_right(self):
        assert find_display_cell([(0, 0), (1, 0), (1, 1)]) == (1, 1)
        assert find_display_cell([(0, 3), (1, 0)]) == (1, 0)
        assert find_display_cell([(2, 2)]) == (2, 2)

    def test_same_color_apart_is_two_regions(self, make_board):
        board = make_board("O.O")
        regions = find_regions(board)
        assert len(regions) == 2
        assert {tuple(r.cells) for r in regions} == {((0, 0),), ((0, 2),)}

    def test_region_picks_up_constraint(self, make_board):
        board = make_board("OOB", "OBB")
        board[1][0].constraint = Constraint.sum(7)
        regions = {r.color: r for r in find_regions(board)}
        assert regions['orange'].constraint == Constraint.sum(7)
        assert regions['orange'].display_cell == (1, 0)
        assert regions['blue'].constraint is None
        assert regions['blue'].size() == 3

    def test_colorless_cells_have_no_region(self, make_board):
        assert find_regions(make_board("oo", "..")) == []

    def test_connected_components(self):
        components = connected_components([(0, 0), (0, 1), (2, 2), (3, 2), (0, 5)])
        assert components == [[(0, 0), (0, 1)], [(0, 5)], [(2, 2), (3, 2)]]


class TestBoard:

    def test_empty_board_is_void(self):
        board = empty_board(2, 3)
        assert board_size(board) == (2, 3)
        assert not any(cell.is_foundation for row in board for cell in row)

    def test_cell_key(self):
        assert cell_key(3, 7) == "3-7"

    def test_puzzle_foundation_cells(self, make_board):
        puzzle = Puzzle(make_board(".O", "oO"), [], [])
        assert puzzle.rows == 2 and puzzle.cols == 2
        assert puzzle.foundation_cells() == [(0, 1), (1, 0), (1, 1)]
        assert len(find_regions(puzzle.board)) == 1
