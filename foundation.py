"""
Foundation generation: choose which grid cells make up the playable shape.

Strategies are picked by weight: a curated template, a mirrored blob, a free
blob, or a plain rectangle. Whatever the strategy, every connected piece of
the result has an even number of cells so dominoes can cover it.
"""
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Set, Tuple
import random

from grid import (
    Coord, WORK_GRID_ROWS, WORK_GRID_COLS, connected_components, neighbors,
)
from shapes import FALLBACK_TEMPLATE, TEMPLATES, Hint, ShapeTemplate
from logger import get_logger

LOGGER = get_logger(__name__)

TEMPLATE = 'template'
SYMMETRIC_BLOB = 'symmetric_blob'
FREE_BLOB = 'free_blob'
RECTANGLE = 'rectangle'

# Candidate (rows, cols) for the rectangle strategy; every area is even
RECTANGLE_SIZES: Tuple[Tuple[int, int], ...] = (
    (4, 4), (4, 5), (4, 6), (5, 6), (6, 6), (4, 8), (6, 8),
)

# Largest foundation a double-six set can cover
MAX_FOUNDATION_CELLS = 56


@dataclass
class FoundationConfig:
    rows: int = WORK_GRID_ROWS
    cols: int = WORK_GRID_COLS
    template_weight: float = 0.45
    symmetric_weight: float = 0.25
    blob_weight: float = 0.2
    rectangle_weight: float = 0.1
    min_blob_cells: int = 16
    max_blob_cells: int = 30
    max_cells: int = MAX_FOUNDATION_CELLS


@dataclass
class Foundation:
    """Playable cells plus where they came from."""
    cells: FrozenSet[Coord]
    strategy: str
    hints: List[Hint] = field(default_factory=list)

    def __len__(self):
        return len(self.cells)


def _in_bounds(config: FoundationConfig) -> Callable[[Coord], bool]:
    return lambda cell: 0 <= cell[0] < config.rows and 0 <= cell[1] < config.cols


def center_offset(height: int, width: int, rows: int, cols: int) -> Coord:
    """Offset that centers a height x width shape on a rows x cols grid."""
    return (rows - height) // 2, (cols - width) // 2


def place_template(template: ShapeTemplate, config: FoundationConfig) -> Foundation:
    """Center a template on the grid, moving its hints along with it."""
    dr, dc = center_offset(template.height, template.width, config.rows, config.cols)
    cells = frozenset((r + dr, c + dc) for r, c in template.cells())
    hints = [hint.shifted(dr, dc) for hint in template.hints]
    return Foundation(cells, f"{TEMPLATE}:{template.name}", hints)


def grow_blob(
    seed: Coord,
    target: int,
    allowed: Callable[[Coord], bool],
    rng: random.Random,
) -> Set[Coord]:
    """
    Grow a connected blob from ``seed`` by repeatedly adding a random
    frontier cell until it holds ``target`` cells or cannot grow further.
    """
    blob = {seed}
    while len(blob) < target:
        frontier = sorted({
            n for cell in blob for n in neighbors(cell)
            if n not in blob and allowed(n)
        })
        if not frontier:
            break
        blob.add(rng.choice(frontier))
    return blob


def symmetric_blob(rng: random.Random, config: FoundationConfig) -> Foundation:
    """Grow a blob on the left half and mirror it across the vertical axis."""
    half = config.cols // 2
    width = half * 2
    target = rng.randint(config.min_blob_cells, config.max_blob_cells) // 2
    seed = (rng.randrange(config.rows), half - 1)

    def allowed(cell: Coord) -> bool:
        return 0 <= cell[0] < config.rows and 0 <= cell[1] < half

    left = grow_blob(seed, target, allowed, rng)
    cells = set(left)
    cells.update((r, width - 1 - c) for r, c in left)
    return Foundation(frozenset(cells), SYMMETRIC_BLOB)


def free_blob(rng: random.Random, config: FoundationConfig) -> Foundation:
    """Grow an unmirrored blob from a random interior cell."""
    target = rng.randint(config.min_blob_cells, config.max_blob_cells)
    seed = (
        rng.randint(1, max(1, config.rows - 2)),
        rng.randint(1, max(1, config.cols - 2)),
    )
    cells = grow_blob(seed, target, _in_bounds(config), rng)
    return Foundation(frozenset(cells), FREE_BLOB)


def rectangle(rng: random.Random, config: FoundationConfig) -> Foundation:
    """A centered rectangle picked from a fixed list of sizes."""
    sizes = [
        (h, w) for h, w in RECTANGLE_SIZES
        if h <= config.rows and w <= config.cols and h * w <= config.max_cells
    ]
    if not sizes:
        sizes = [(2, 2)]
    height, width = rng.choice(sizes)
    return fixed_rectangle(height, width, config)


def fixed_rectangle(height: int, width: int, config: FoundationConfig) -> Foundation:
    if not (0 < height <= config.rows and 0 < width <= config.cols):
        raise ValueError(f"Rectangle {height}x{width} does not fit the {config.rows}x{config.cols} grid")
    dr, dc = center_offset(height, width, config.rows, config.cols)
    cells = frozenset(
        (r + dr, c + dc) for r in range(height) for c in range(width)
    )
    return Foundation(cells, f"{RECTANGLE}:{height}x{width}")


def _stays_connected(component: List[Coord], removed: Coord) -> bool:
    rest = [cell for cell in component if cell != removed]
    return len(connected_components(rest)) <= 1


def removable_cell(component: List[Coord], rng: random.Random) -> Optional[Coord]:
    """
    Pick an edge cell whose removal keeps ``component`` connected.
    Cells with fewer neighbours are preferred; the limit is relaxed step by
    step until some cell qualifies.
    """
    members = set(component)
    degree = {
        cell: sum(1 for n in neighbors(cell) if n in members)
        for cell in component
    }
    for limit in (1, 2, 3, 4):
        candidates = [
            cell for cell in component
            if degree[cell] <= limit and _stays_connected(component, cell)
        ]
        if candidates:
            return rng.choice(candidates)
    return None


def repair_parity(cells: FrozenSet[Coord], rng: random.Random) -> Optional[FrozenSet[Coord]]:
    """
    Remove one cell from every odd-sized component.
    Returns None when some component has no safely removable cell.
    """
    repaired = set(cells)
    for component in connected_components(cells):
        if len(component) % 2 == 0:
            continue
        cell = removable_cell(component, rng)
        if cell is None:
            return None
        repaired.discard(cell)
    return frozenset(repaired)


def _eligible_templates(config: FoundationConfig) -> List[ShapeTemplate]:
    return [
        t for t in TEMPLATES
        if t.height <= config.rows and t.width <= config.cols
        and len(t.cells()) <= config.max_cells
    ]


def generate_foundation(rng: random.Random, config: Optional[FoundationConfig] = None) -> Foundation:
    """Produce a non-empty foundation with even-sized components."""
    config = config or FoundationConfig()
    strategies = [TEMPLATE, SYMMETRIC_BLOB, FREE_BLOB, RECTANGLE]
    weights = [
        config.template_weight,
        config.symmetric_weight,
        config.blob_weight,
        config.rectangle_weight,
    ]
    strategy = rng.choices(strategies, weights=weights)[0]
    templates = _eligible_templates(config)

    if strategy == TEMPLATE and templates:
        foundation = place_template(rng.choice(templates), config)
    elif strategy == SYMMETRIC_BLOB:
        foundation = symmetric_blob(rng, config)
    elif strategy == FREE_BLOB:
        foundation = free_blob(rng, config)
    else:
        foundation = rectangle(rng, config)

    cells = repair_parity(foundation.cells, rng)
    if not cells:
        LOGGER.debug("Parity repair failed for %s, using %s", foundation.strategy, FALLBACK_TEMPLATE.name)
        return place_template(FALLBACK_TEMPLATE, config)

    hints = [h for h in foundation.hints if all(cell in cells for cell in h.cells)]
    if len(hints) < len(foundation.hints):
        LOGGER.debug("Dropped %d hint(s) touching removed cells", len(foundation.hints) - len(hints))
    return Foundation(cells, foundation.strategy, hints)
