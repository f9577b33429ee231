"""
Puzzle generator.

Works backwards from a solution: pick a foundation, tile it with dominoes,
grow regions, assign pips, then derive for every region a constraint that
the assignment already satisfies.
"""
from typing import List, Dict, Tuple, Optional
from dataclasses import dataclass, replace
import random

from domino_sets import Domino
from foundation import Foundation, FoundationConfig, fixed_rectangle, generate_foundation
from grid import (
    Constraint, Coord, Puzzle, PlacedDomino, WORK_GRID_ROWS, WORK_GRID_COLS,
    empty_board, find_display_cell,
)
from regions import MAX_REGION_SIZE, SKIP_PROBABILITY, color_regions, grow_regions, region_adjacency
from shapes import Hint
from solver import DEFAULT_MAX_NODES, assign_dominoes
from tiler import Slot, tile_foundation
from validator import validate_puzzle
from exceptions import GenerationError
from logger import get_logger

LOGGER = get_logger(__name__)

INEQUALITY_PROBABILITY = 0.15
MAX_INEQUALITY_MARGIN = 3
MIDPOINT_PIPS = 3


@dataclass
class GeneratorConfig:
    rows: int = WORK_GRID_ROWS
    cols: int = WORK_GRID_COLS
    seed: Optional[int] = None
    max_attempts: int = 10
    max_region_size: int = MAX_REGION_SIZE
    skip_probability: float = SKIP_PROBABILITY
    inequality_probability: float = INEQUALITY_PROBABILITY
    hint_node_limit: int = DEFAULT_MAX_NODES
    keep_dominoes_whole: bool = False
    template_weight: float = 0.45
    symmetric_weight: float = 0.25
    blob_weight: float = 0.2
    rectangle_weight: float = 0.1
    min_blob_cells: int = 16
    max_blob_cells: int = 30
    fallback_size: Tuple[int, int] = (4, 6)

    def __post_init__(self):
        height, width = self.fallback_size
        if not (0 < height <= self.rows and 0 < width <= self.cols):
            raise ValueError(
                f"Fallback rectangle {height}x{width} does not fit the {self.rows}x{self.cols} grid"
            )

    def to_foundation_config(self) -> FoundationConfig:
        return FoundationConfig(
            rows=self.rows,
            cols=self.cols,
            template_weight=self.template_weight,
            symmetric_weight=self.symmetric_weight,
            blob_weight=self.blob_weight,
            rectangle_weight=self.rectangle_weight,
            min_blob_cells=self.min_blob_cells,
            max_blob_cells=self.max_blob_cells,
        )


def derive_constraint(
    values: List[int],
    dominoes: List[Domino],
    rng: random.Random,
    inequality_probability: float = INEQUALITY_PROBABILITY,
) -> Constraint:
    """
    Pick a constraint that the region's actual pips satisfy.

    ``values`` are the pips on the region's cells and ``dominoes`` the
    dominoes covering those same cells (one entry per cell).
    """
    distinct = {d.id for d in dominoes}
    has_double = any(d.is_double for d in dominoes)
    if len(set(values)) == 1 and len(distinct) >= 2 and (not has_double or len(values) > 2):
        return Constraint.equal()

    total = sum(values)
    if rng.random() < inequality_probability:
        margin = rng.randint(1, MAX_INEQUALITY_MARGIN)
        if total < MIDPOINT_PIPS * len(values):
            return Constraint.less_than(total + margin)
        return Constraint.greater_than(total - margin)

    return Constraint.sum(total)


def resolve_hints(hints: List[Hint], region_of: Dict[Coord, int]) -> Dict[int, Constraint]:
    """
    Map each hint to the region holding all of its cells. Hints split over
    several regions are dropped; the first hint wins a shared region.
    """
    resolved: Dict[int, Constraint] = {}
    for hint in hints:
        ids = {region_of.get(cell) for cell in hint.cells}
        if None in ids or len(ids) != 1:
            LOGGER.debug("Hint on %s spans %d regions, skipping", hint.cells, len(ids))
            continue
        rid = ids.pop()
        resolved.setdefault(rid, hint.constraint)
    return resolved


class PuzzleGenerator:
    """
    Generates complete puzzles from a seeded random stream.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.seed = self.config.seed if self.config.seed is not None else random.randrange(2 ** 31)
        self.rng = random.Random(self.seed)

    def generate(self) -> Puzzle:
        """Generate a puzzle, retrying foundations that cannot be tiled."""
        foundation_config = self.config.to_foundation_config()

        for attempt in range(1, self.config.max_attempts + 1):
            foundation = generate_foundation(self.rng, foundation_config)
            LOGGER.debug(
                "Attempt %d/%d: %s with %d cells",
                attempt, self.config.max_attempts, foundation.strategy, len(foundation),
            )
            slots = tile_foundation(foundation.cells, self.rng)
            if slots is None:
                LOGGER.debug("Foundation %s is not tileable", foundation.strategy)
                continue

            puzzle = self.build_puzzle(foundation, slots)
            if puzzle is not None:
                return puzzle

        LOGGER.info("No tileable foundation after %d attempts, using fallback rectangle", self.config.max_attempts)
        height, width = self.config.fallback_size
        foundation = fixed_rectangle(height, width, foundation_config)
        slots = tile_foundation(foundation.cells, self.rng)
        puzzle = self.build_puzzle(foundation, slots) if slots else None
        if puzzle is None:
            raise GenerationError(f"Fallback rectangle {height}x{width} could not be built")
        return puzzle

    def build_puzzle(self, foundation: Foundation, slots: List[Slot]) -> Optional[Puzzle]:
        """Turn a tiled foundation into a finished puzzle."""
        config = self.config
        region_of = grow_regions(
            foundation.cells,
            self.rng,
            max_size=config.max_region_size,
            skip_probability=config.skip_probability,
            seed_groups=[hint.cells for hint in foundation.hints],
            slots=slots if config.keep_dominoes_whole else None,
        )
        region_hints = resolve_hints(foundation.hints, region_of)

        result = assign_dominoes(slots, self.rng, region_of, region_hints, config.hint_node_limit)
        if result is None:
            LOGGER.debug("%d slots exceed the domino set", len(slots))
            return None

        values: Dict[Coord, int] = {}
        covering: Dict[Coord, Domino] = {}
        placements: List[PlacedDomino] = []
        for slot, domino in zip(slots, result.dominoes):
            values[slot.anchor] = domino.first
            values[slot.other] = domino.second
            covering[slot.anchor] = covering[slot.other] = domino
            placements.append(PlacedDomino(domino, slot.r1, slot.c1, slot.orientation))

        region_cells: Dict[int, List[Coord]] = {}
        for cell, rid in sorted(region_of.items()):
            region_cells.setdefault(rid, []).append(cell)

        colors = color_regions(region_adjacency(region_of), self.rng)
        board = empty_board(config.rows, config.cols)
        for rid, cells in region_cells.items():
            if result.hints_enforced and rid in region_hints:
                constraint = region_hints[rid]
            else:
                constraint = derive_constraint(
                    [values[c] for c in cells],
                    [covering[c] for c in cells],
                    self.rng,
                    config.inequality_probability,
                )
            for r, c in cells:
                board[r][c].is_foundation = True
                board[r][c].region_color = colors[rid]
            dr, dc = find_display_cell(cells)
            board[dr][dc].constraint = constraint

        puzzle = Puzzle(
            board=board,
            solution_dominoes=[d.canonical() for d in result.dominoes],
            solution_placements=placements,
            name=foundation.strategy,
            seed=self.seed,
        )
        if not validate_puzzle(puzzle.board, puzzle.solution_placements):
            LOGGER.warning("Generated board for %s rejected its own solution", foundation.strategy)
            return None
        return puzzle


def generate_puzzle(seed: Optional[int] = None, config: Optional[GeneratorConfig] = None) -> Puzzle:
    """Generate one random puzzle. The same seed gives the same puzzle."""
    config = config or GeneratorConfig()
    if seed is not None:
        config = replace(config, seed=seed)
    return PuzzleGenerator(config).generate()
