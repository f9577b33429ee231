"""
Exact-cover tiling of a foundation by dominoes.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple
import random

from grid import Coord, Orientation, connected_components
from logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_NODE_LIMIT = 200_000


@dataclass(frozen=True)
class Slot:
    """Footprint of one domino: an anchor and its right or lower neighbour."""
    r1: int
    c1: int
    r2: int
    c2: int

    @property
    def anchor(self) -> Coord:
        return (self.r1, self.c1)

    @property
    def other(self) -> Coord:
        return (self.r2, self.c2)

    @property
    def orientation(self) -> Orientation:
        if self.r1 == self.r2:
            return Orientation.HORIZONTAL
        return Orientation.VERTICAL

    def cells(self) -> Tuple[Coord, Coord]:
        return (self.anchor, self.other)


def is_balanced(cells: Iterable[Coord]) -> bool:
    """
    Every domino covers one light and one dark checkerboard square, so a
    tileable component has as many of each.
    """
    dark = light = 0
    for r, c in cells:
        if (r + c) % 2:
            dark += 1
        else:
            light += 1
    return dark == light


def tile_foundation(
    foundation: Iterable[Coord],
    rng: random.Random,
    node_limit: int = DEFAULT_NODE_LIMIT,
) -> Optional[List[Slot]]:
    """
    Partition the foundation into dominoes.

    Cells are visited in row-major order. The first uncovered cell always
    has its upper and left neighbours covered already, so it can only pair
    with the cell to its right or below; both are tried in random order.
    Returns the slots, or None when no tiling exists or the search budget
    runs out.
    """
    cells = set(foundation)
    for component in connected_components(cells):
        if len(component) % 2 or not is_balanced(component):
            return None

    order = sorted(cells)
    covered: Set[Coord] = set()
    slots: List[Slot] = []
    nodes = 0

    def first_uncovered(start: int) -> int:
        index = start
        while index < len(order) and order[index] in covered:
            index += 1
        return index

    def backtrack(start: int) -> bool:
        nonlocal nodes
        index = first_uncovered(start)
        if index == len(order):
            return True
        nodes += 1
        if nodes > node_limit:
            return False

        r, c = order[index]
        candidates = [(r, c + 1), (r + 1, c)]
        rng.shuffle(candidates)
        for other in candidates:
            if other not in cells or other in covered:
                continue
            covered.add((r, c))
            covered.add(other)
            slots.append(Slot(r, c, other[0], other[1]))

            if backtrack(index + 1):
                return True

            slots.pop()
            covered.discard((r, c))
            covered.discard(other)
        return False

    if backtrack(0):
        return slots
    if nodes > node_limit:
        LOGGER.debug("Tiling gave up after %d nodes", node_limit)
    return None
