"""
Unit tests for end-to-end puzzle generation.
"""
import random

import pytest

from domino_sets import Domino, DominoSet
from encoding import encode_puzzle
from exceptions import GenerationError
from foundation import Foundation, FoundationConfig, place_template
from generator import (
    GeneratorConfig, PuzzleGenerator, derive_constraint, generate_puzzle, resolve_hints,
)
from grid import Constraint, ConstraintType, find_regions
from shapes import Hint, TEMPLATES_BY_NAME
from tiler import tile_foundation
from validator import validate_puzzle


class TestGeneratePuzzle:

    @pytest.mark.parametrize("seed", range(12))
    def test_solution_validates(self, seed):
        puzzle = generate_puzzle(seed=seed)
        assert validate_puzzle(puzzle.board, puzzle.solution_placements)

    @pytest.mark.parametrize("seed", range(12))
    def test_dominoes_are_distinct_and_cover_foundation(self, seed):
        puzzle = generate_puzzle(seed=seed)
        ids = [d.id for d in puzzle.solution_dominoes]
        assert len(ids) == len(set(ids))
        assert set(ids) <= {d.id for d in DominoSet.double_six()}
        assert 2 * len(puzzle.solution_placements) == len(puzzle.foundation_cells())

    @pytest.mark.parametrize("seed", range(12))
    def test_every_region_is_colored_and_constrained(self, seed):
        puzzle = generate_puzzle(seed=seed)
        for r, c in puzzle.foundation_cells():
            assert puzzle.board[r][c].region_color is not None
        for region in find_regions(puzzle.board):
            assert region.constraint is not None
            assert puzzle.board[region.display_cell[0]][region.display_cell[1]].constraint is not None

    def test_same_seed_same_puzzle(self):
        a = generate_puzzle(seed=2024)
        b = generate_puzzle(seed=2024)
        assert encode_puzzle(a.board, a.solution_placements) == encode_puzzle(b.board, b.solution_placements)
        assert a.seed == 2024

    def test_random_seed_is_recorded(self):
        puzzle = generate_puzzle()
        assert isinstance(puzzle.seed, int)

    def test_solution_dominoes_are_canonical(self):
        puzzle = generate_puzzle(seed=5)
        assert all(d.first <= d.second for d in puzzle.solution_dominoes)

    @pytest.mark.parametrize("seed", range(6))
    def test_keep_dominoes_whole(self, seed):
        puzzle = generate_puzzle(config=GeneratorConfig(seed=seed, keep_dominoes_whole=True))
        region_index = {}
        for i, region in enumerate(find_regions(puzzle.board)):
            for cell in region.cells:
                region_index[cell] = i
        for placed in puzzle.solution_placements:
            a, b = placed.cells()
            assert region_index[a] == region_index[b]
        assert validate_puzzle(puzzle.board, puzzle.solution_placements)

    def test_rectangle_only_config(self):
        config = GeneratorConfig(
            seed=11, template_weight=0, symmetric_weight=0, blob_weight=0, rectangle_weight=1,
        )
        puzzle = generate_puzzle(config=config)
        assert puzzle.name.startswith("rectangle:")

    def test_fallback_rectangle_when_attempts_run_out(self):
        generator = PuzzleGenerator(GeneratorConfig(seed=3, max_attempts=0))
        puzzle = generator.generate()
        assert puzzle.name == "rectangle:4x6"
        assert len(puzzle.solution_placements) == 12

    def test_unbuildable_fallback_raises(self):
        generator = PuzzleGenerator(GeneratorConfig(seed=3, max_attempts=0, fallback_size=(3, 3)))
        with pytest.raises(GenerationError):
            generator.generate()

    @pytest.mark.parametrize("size", [(9, 4), (4, 11), (0, 4)])
    def test_fallback_must_fit_grid(self, size):
        with pytest.raises(ValueError):
            GeneratorConfig(fallback_size=size)

    def test_fallback_checked_against_custom_grid(self):
        with pytest.raises(ValueError):
            GeneratorConfig(rows=4, cols=4, fallback_size=(4, 6))
        assert GeneratorConfig(rows=4, cols=4, fallback_size=(4, 4)).fallback_size == (4, 4)


class TestDeriveConstraint:

    def test_equal_across_two_dominoes(self):
        constraint = derive_constraint([3, 3], [Domino(3, 1), Domino(3, 5)], random.Random(0))
        assert constraint == Constraint.equal()

    def test_single_double_is_not_equal(self):
        double = Domino(3, 3)
        constraint = derive_constraint([3, 3], [double, double], random.Random(0), inequality_probability=0)
        assert constraint == Constraint.sum(6)

    def test_double_inside_larger_region_is_equal(self):
        double = Domino(2, 2)
        constraint = derive_constraint([2, 2, 2], [double, double, Domino(2, 6)], random.Random(0))
        assert constraint == Constraint.equal()

    def test_sum_by_default(self):
        constraint = derive_constraint([2, 5], [Domino(2, 0), Domino(5, 1)], random.Random(0), 0)
        assert constraint == Constraint.sum(7)

    def test_low_total_becomes_less_than(self):
        values = [1, 2]
        constraint = derive_constraint(values, [Domino(1, 0), Domino(2, 4)], random.Random(0), 1)
        assert constraint.type == ConstraintType.LESS
        assert 3 < constraint.target <= 6
        assert constraint.is_satisfied(values)

    def test_high_total_becomes_greater_than(self):
        values = [6, 5]
        constraint = derive_constraint(values, [Domino(6, 0), Domino(5, 1)], random.Random(0), 1)
        assert constraint.type == ConstraintType.GREATER
        assert 8 <= constraint.target < 11
        assert constraint.is_satisfied(values)


class TestResolveHints:

    def test_hint_inside_one_region(self):
        hint = Hint(((0, 0), (0, 1)), Constraint.sum(5))
        assert resolve_hints([hint], {(0, 0): 2, (0, 1): 2}) == {2: Constraint.sum(5)}

    def test_split_hint_is_dropped(self):
        hint = Hint(((0, 0), (0, 1)), Constraint.sum(5))
        assert resolve_hints([hint], {(0, 0): 0, (0, 1): 1}) == {}

    def test_hint_off_foundation_is_dropped(self):
        hint = Hint(((0, 0), (9, 9)), Constraint.equal())
        assert resolve_hints([hint], {(0, 0): 0}) == {}

    def test_first_hint_wins(self):
        first = Hint(((0, 0),), Constraint.sum(3))
        second = Hint(((0, 1),), Constraint.equal())
        assert resolve_hints([first, second], {(0, 0): 0, (0, 1): 0}) == {0: Constraint.sum(3)}


def region_at(board, cell):
    for region in find_regions(board):
        if cell in region.cells:
            return region
    raise AssertionError(f"No region covers {cell}")


class TestHintOverride:

    @pytest.mark.parametrize("seed", range(5))
    def test_enforced_hint_replaces_derived_constraint(self, seed):
        foundation = place_template(TEMPLATES_BY_NAME['plus'], FoundationConfig())
        generator = PuzzleGenerator(GeneratorConfig(seed=seed))
        slots = tile_foundation(foundation.cells, generator.rng)
        puzzle = generator.build_puzzle(foundation, slots)

        region = region_at(puzzle.board, foundation.hints[0].cells[0])
        r, c = region.display_cell
        assert puzzle.board[r][c].constraint == Constraint.sum(12)
        assert validate_puzzle(puzzle.board, puzzle.solution_placements)

    @pytest.mark.parametrize("seed", range(5))
    def test_unreachable_hint_never_reaches_board(self, seed):
        plus = place_template(TEMPLATES_BY_NAME['plus'], FoundationConfig())
        hint = Hint(plus.hints[0].cells, Constraint.sum(100))
        foundation = Foundation(plus.cells, plus.strategy, [hint])
        generator = PuzzleGenerator(GeneratorConfig(seed=seed))
        slots = tile_foundation(foundation.cells, generator.rng)
        puzzle = generator.build_puzzle(foundation, slots)

        region = region_at(puzzle.board, hint.cells[0])
        r, c = region.display_cell
        assert puzzle.board[r][c].constraint != Constraint.sum(100)
        assert puzzle.board[r][c].constraint is not None
        assert validate_puzzle(puzzle.board, puzzle.solution_placements)
