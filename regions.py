"""
Region growing and coloring for generated puzzles.
"""
import math
import random
from typing import Dict, Iterable, Optional, Sequence, Set

from disjoint_set import DisjointSet
from grid import Coord, PALETTE, neighbors
from tiler import Slot
from logger import get_logger

LOGGER = get_logger(__name__)

MAX_REGION_SIZE = 5
SKIP_PROBABILITY = 0.3
MIN_REGION_CAP = 8
COLORING_NODE_LIMIT = 10_000


def region_cap(cell_count: int) -> int:
    """Upper bound on how many regions a foundation may be split into."""
    return max(MIN_REGION_CAP, math.ceil(cell_count / 3))


def _union_group(ds: DisjointSet, cells: Sequence[Coord], max_size: int) -> None:
    group = set(cells)
    for cell in cells:
        for n in neighbors(cell):
            if n in group and ds.set_size(cell) + ds.set_size(n) <= max_size:
                ds.union(cell, n)


def _force_merge(ds: DisjointSet, cells: Set[Coord], cap: int) -> None:
    """Merge the smallest regions into a neighbour until under the cap."""
    while ds.num_sets() > cap:
        members = ds.get_sets()
        merged = False
        for root in sorted(members, key=lambda r: (len(members[r]), r)):
            adjacent = {
                ds.find(n)
                for cell in members[root]
                for n in neighbors(cell)
                if n in cells and not ds.connected(n, root)
            }
            if adjacent:
                target = min(adjacent, key=lambda r: (len(members[r]), r))
                ds.union(root, target)
                merged = True
                break
        if not merged:
            LOGGER.debug("No adjacent regions left to merge at %d regions", ds.num_sets())
            return


def grow_regions(
    foundation: Iterable[Coord],
    rng: random.Random,
    max_size: int = MAX_REGION_SIZE,
    skip_probability: float = SKIP_PROBABILITY,
    seed_groups: Sequence[Sequence[Coord]] = (),
    slots: Optional[Sequence[Slot]] = None,
) -> Dict[Coord, int]:
    """
    Partition the foundation into small connected regions.

    When given, the two cells of every slot are joined first, so no domino
    straddles a region border. ``seed_groups`` (hint cells) are joined next,
    then the random pass runs. Returns a map from cell to a dense region id,
    numbered in row-major order of each region's first cell.
    """
    cells = set(foundation)
    ds = DisjointSet(sorted(cells))

    for slot in slots or ():
        ds.union(slot.anchor, slot.other)
    for group in seed_groups:
        _union_group(ds, [c for c in group if c in cells], max_size)

    edges = []
    for r, c in sorted(cells):
        for other in ((r, c + 1), (r + 1, c)):
            if other in cells:
                edges.append(((r, c), other))
    rng.shuffle(edges)

    for a, b in edges:
        root_a, root_b = ds.find(a), ds.find(b)
        if root_a == root_b:
            continue
        size_a, size_b = ds.size[root_a], ds.size[root_b]
        if size_a + size_b > max_size:
            continue
        if size_a > 1 and size_b > 1 and rng.random() < skip_probability:
            continue
        ds.union(root_a, root_b)

    _force_merge(ds, cells, region_cap(len(cells)))

    region_of: Dict[Coord, int] = {}
    ids: Dict[Coord, int] = {}
    for cell in sorted(cells):
        root = ds.find(cell)
        if root not in ids:
            ids[root] = len(ids)
        region_of[cell] = ids[root]
    return region_of


def region_adjacency(region_of: Dict[Coord, int]) -> Dict[int, Set[int]]:
    """Regions are adjacent when any of their cells touch orthogonally."""
    adjacency: Dict[int, Set[int]] = {rid: set() for rid in region_of.values()}
    for cell, rid in region_of.items():
        for n in neighbors(cell):
            other = region_of.get(n)
            if other is not None and other != rid:
                adjacency[rid].add(other)
                adjacency[other].add(rid)
    return adjacency


def _backtrack_coloring(adjacency: Dict[int, Set[int]], palette: Sequence[str]) -> Optional[Dict[int, str]]:
    colors: Dict[int, str] = {}
    order = sorted(adjacency, key=lambda rid: (-len(adjacency[rid]), rid))
    nodes = 0

    def backtrack(index: int) -> bool:
        nonlocal nodes
        if index == len(order):
            return True
        nodes += 1
        if nodes > COLORING_NODE_LIMIT:
            return False
        rid = order[index]
        used = {colors[n] for n in adjacency[rid] if n in colors}
        for color in palette:
            if color in used:
                continue
            colors[rid] = color
            if backtrack(index + 1):
                return True
            del colors[rid]
        return False

    if backtrack(0):
        return colors
    return None


def color_regions(
    adjacency: Dict[int, Set[int]],
    rng: Optional[random.Random] = None,
    palette: Sequence[str] = PALETTE,
) -> Dict[int, str]:
    """
    Greedy coloring in region-id order so neighbours differ.

    With an rng the color is drawn at random from those still free,
    otherwise the first free color is used. When the greedy pass runs out
    of colors a small exhaustive search is tried before falling back to
    ``palette[id % len(palette)]``, which may repeat a neighbour's color.
    """
    colors: Dict[int, str] = {}
    stuck = False
    for rid in sorted(adjacency):
        used = {colors[n] for n in adjacency[rid] if n in colors}
        available = [c for c in palette if c not in used]
        if not available:
            stuck = True
            colors[rid] = palette[rid % len(palette)]
        elif rng is not None:
            colors[rid] = rng.choice(available)
        else:
            colors[rid] = available[0]

    if stuck:
        exact = _backtrack_coloring(adjacency, palette)
        if exact is not None:
            return exact
        LOGGER.warning("Region coloring fell back to palette order; neighbours may share a color")
    return colors
