"""
Checks a candidate placement of dominoes against a board.

All functions are pure: they read the board and placements and never
modify either.
"""
from typing import Dict, List, Set

from grid import Board, Coord, PlacedDomino, board_size, cell_key, find_regions, placement_values


def coverage_counts(placed: List[PlacedDomino]) -> Dict[Coord, int]:
    """How many placed dominoes cover each cell."""
    counts: Dict[Coord, int] = {}
    for p in placed:
        for cell in p.cells():
            counts[cell] = counts.get(cell, 0) + 1
    return counts


def is_board_full(board: Board, placed: List[PlacedDomino]) -> bool:
    """True iff every foundation cell is covered by exactly one domino."""
    counts = coverage_counts(placed)
    rows, cols = board_size(board)
    for r in range(rows):
        for c in range(cols):
            if board[r][c].is_foundation and counts.get((r, c), 0) != 1:
                return False
    return True


def get_violated_regions(board: Board, placed: List[PlacedDomino]) -> Set[str]:
    """
    Display-cell keys of regions whose constraint is broken.
    Regions with any uncovered cell are not judged yet.
    """
    values = placement_values(placed)
    violated: Set[str] = set()
    for region in find_regions(board):
        if region.constraint is None:
            continue
        if any(cell not in values for cell in region.cells):
            continue
        if not region.constraint.is_satisfied([values[cell] for cell in region.cells]):
            violated.add(cell_key(*region.display_cell))
    return violated


def validate_puzzle(board: Board, placed: List[PlacedDomino]) -> bool:
    """True iff the board is full and every region constraint holds."""
    return is_board_full(board, placed) and not get_violated_regions(board, placed)
