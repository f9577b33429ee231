"""
Unit tests for foundation shapes and parity repair.
"""
import random

import pytest

from foundation import (
    FoundationConfig, fixed_rectangle, generate_foundation, place_template,
    removable_cell, repair_parity, center_offset,
)
from grid import connected_components
from shapes import TEMPLATES, TEMPLATES_BY_NAME


class TestTemplates:

    def test_templates_fit_work_grid(self):
        config = FoundationConfig()
        for template in TEMPLATES:
            assert template.height <= config.rows, template.name
            assert template.width <= config.cols, template.name

    def test_hints_lie_on_template(self):
        for template in TEMPLATES:
            cells = template.cells()
            for hint in template.hints:
                assert set(hint.cells) <= cells, template.name

    def test_place_template_centers_shape_and_hints(self):
        foundation = place_template(TEMPLATES_BY_NAME['plus'], FoundationConfig())
        assert foundation.strategy == "template:plus"
        assert min(r for r, _ in foundation.cells) == 1
        assert min(c for _, c in foundation.cells) == 2
        assert foundation.hints[0].cells == ((3, 4), (3, 5), (4, 4), (4, 5))


class TestParity:

    def test_flag_loses_one_cell(self):
        cells = TEMPLATES_BY_NAME['flag'].cells()
        assert len(cells) % 2 == 1
        repaired = repair_parity(cells, random.Random(0))
        assert len(repaired) == len(cells) - 1
        assert len(connected_components(repaired)) == 1

    def test_even_shape_untouched(self):
        cells = fixed_rectangle(4, 6, FoundationConfig()).cells
        assert repair_parity(cells, random.Random(0)) == cells

    def test_each_odd_island_is_repaired(self):
        cells = frozenset({(0, 0), (0, 1), (0, 2), (5, 5), (5, 6), (5, 7)})
        repaired = repair_parity(cells, random.Random(0))
        assert all(len(c) % 2 == 0 for c in connected_components(repaired))
        assert len(connected_components(repaired)) == 2

    def test_removable_cell_on_line_is_an_end(self):
        line = [(0, 0), (0, 1), (0, 2)]
        assert removable_cell(line, random.Random(0)) in {(0, 0), (0, 2)}


class TestGenerateFoundation:

    @pytest.mark.parametrize("seed", range(25))
    def test_components_are_even_and_in_bounds(self, seed):
        config = FoundationConfig()
        foundation = generate_foundation(random.Random(seed), config)
        assert len(foundation) > 0
        assert len(foundation) <= config.max_cells
        for r, c in foundation.cells:
            assert 0 <= r < config.rows and 0 <= c < config.cols
        for component in connected_components(foundation.cells):
            assert len(component) % 2 == 0

    @pytest.mark.parametrize("seed", range(25))
    def test_hints_stay_on_foundation(self, seed):
        foundation = generate_foundation(random.Random(seed))
        for hint in foundation.hints:
            assert all(cell in foundation.cells for cell in hint.cells)

    def test_same_seed_same_foundation(self):
        a = generate_foundation(random.Random(99))
        b = generate_foundation(random.Random(99))
        assert a.cells == b.cells
        assert a.strategy == b.strategy

    def test_only_rectangles_when_weighted(self):
        config = FoundationConfig(template_weight=0, symmetric_weight=0, blob_weight=0, rectangle_weight=1)
        foundation = generate_foundation(random.Random(5), config)
        assert foundation.strategy.startswith("rectangle:")

    def test_fixed_rectangle(self):
        foundation = fixed_rectangle(4, 6, FoundationConfig())
        assert len(foundation) == 24
        assert foundation.strategy == "rectangle:4x6"
        assert min(foundation.cells) == (2, 2)

    @pytest.mark.parametrize("height, width", [(9, 2), (2, 11)])
    def test_fixed_rectangle_must_fit(self, height, width):
        with pytest.raises(ValueError):
            fixed_rectangle(height, width, FoundationConfig())

    def test_center_offset(self):
        assert center_offset(4, 6, 8, 10) == (2, 2)
        assert center_offset(7, 8, 8, 10) == (0, 1)
