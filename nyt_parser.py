"""
Parser for NYT Pips puzzle JSON format.
Converts a day's puzzle into our internal Puzzle, centred on the work grid.
"""
import json
from typing import Any, Dict, List, Optional, Tuple

from domino_sets import Domino
from grid import (
    Coord, Constraint, Puzzle, PlacedDomino, Orientation,
    WORK_GRID_ROWS, WORK_GRID_COLS, empty_board, find_display_cell,
)
from foundation import center_offset
from regions import color_regions, region_adjacency
from exceptions import ExternalPuzzleError, PuzzleTooLargeError

DIFFICULTIES = ("easy", "medium", "hard")


def map_constraint(region: Dict[str, Any]) -> Optional[Constraint]:
    """
    Map an NYT region type onto our constraint.
    'empty' and unrecognised types carry no constraint.
    """
    region_type = region.get("type")
    target = region.get("target")
    if target is None:
        target = 0
    if region_type == "equals":
        return Constraint.equal()
    if region_type == "unequal":
        return Constraint.not_equal()
    if region_type not in ("sum", "less", "greater"):
        return None
    if not isinstance(target, int) or isinstance(target, bool):
        raise ExternalPuzzleError(f"Region target {target!r} is not an integer")
    if region_type == "sum":
        return Constraint.sum(target)
    if region_type == "less":
        return Constraint.less_than(target)
    return Constraint.greater_than(target)


def _pair(value: Any, what: str) -> Tuple[int, int]:
    if (
        not isinstance(value, (list, tuple)) or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise ExternalPuzzleError(f"Malformed {what}: {value!r}")
    return value[0], value[1]


def convert_external_puzzle(
    puzzle_data: Dict[str, Any],
    source: str = "NYT",
    rows: int = WORK_GRID_ROWS,
    cols: int = WORK_GRID_COLS,
) -> Puzzle:
    """
    Convert one NYT puzzle dict (regions, dominoes, solution) to a Puzzle.

    Raises PuzzleTooLargeError if the shape does not fit on the grid and
    ExternalPuzzleError for anything malformed.
    """
    try:
        regions = puzzle_data["regions"]
        dominoes = [_pair(d, "domino") for d in puzzle_data["dominoes"]]
        solution = [
            (_pair(p[0], "solution cell"), _pair(p[1], "solution cell"))
            for p in puzzle_data["solution"]
        ]
        region_indices = [[_pair(i, "region cell") for i in r["indices"]] for r in regions]
    except (KeyError, TypeError, IndexError) as exc:
        raise ExternalPuzzleError(f"Missing or malformed puzzle field: {exc}") from exc

    if len(solution) != len(dominoes):
        raise ExternalPuzzleError(
            f"{len(dominoes)} dominoes but {len(solution)} solution placements"
        )

    # Foundation is every cell a domino sits on, plus every region cell
    all_cells = {cell for pair in solution for cell in pair}
    for cells in region_indices:
        all_cells.update(cells)
    if not all_cells:
        raise ExternalPuzzleError("Puzzle has no cells")

    min_r = min(r for r, _ in all_cells)
    max_r = max(r for r, _ in all_cells)
    min_c = min(c for _, c in all_cells)
    max_c = max(c for _, c in all_cells)
    height = max_r - min_r + 1
    width = max_c - min_c + 1
    if height > rows or width > cols:
        raise PuzzleTooLargeError(f"Puzzle is {height}x{width}, grid is {rows}x{cols}")

    dr, dc = center_offset(height, width, rows, cols)
    offset_r, offset_c = dr - min_r, dc - min_c

    def shift(cell: Coord) -> Coord:
        return (cell[0] + offset_r, cell[1] + offset_c)

    constraints = [map_constraint(r) for r in regions]
    region_of: Dict[Coord, int] = {}
    for i, cells in enumerate(region_indices):
        for cell in cells:
            region_of[shift(cell)] = i
    colors = color_regions(region_adjacency(region_of))

    board = empty_board(rows, cols)
    for cell in all_cells:
        r, c = shift(cell)
        board[r][c].is_foundation = True

    # "empty" regions stay as colorless foundation
    for i, cells in enumerate(region_indices):
        if regions[i].get("type") == "empty" or not cells:
            continue
        shifted = [shift(cell) for cell in cells]
        for r, c in shifted:
            board[r][c].region_color = colors[i]
        display_r, display_c = find_display_cell(shifted)
        board[display_r][display_c].constraint = constraints[i]

    solution_dominoes = [Domino(first, second) for first, second in dominoes]

    placements: List[PlacedDomino] = []
    for domino, (cell1, cell2) in zip(solution_dominoes, solution):
        (r1, c1), (r2, c2) = shift(cell1), shift(cell2)
        if r1 == r2 and abs(c1 - c2) == 1:
            orientation = Orientation.HORIZONTAL
            needs_swap = c1 > c2
        elif c1 == c2 and abs(r1 - r2) == 1:
            orientation = Orientation.VERTICAL
            needs_swap = r1 > r2
        else:
            raise ExternalPuzzleError(f"Solution cells {cell1} and {cell2} are not adjacent")

        # The first listed cell holds the domino's first pip
        placements.append(PlacedDomino(
            domino=domino.flipped() if needs_swap else domino,
            row=min(r1, r2),
            col=min(c1, c2),
            orientation=orientation,
        ))

    return Puzzle(
        board=board,
        solution_dominoes=solution_dominoes,
        solution_placements=placements,
        name=source,
    )


def parse_nyt_puzzle(nyt_data: dict, difficulty: str = "easy") -> Puzzle:
    """
    Parse NYT Pips puzzle JSON into our Puzzle format.

    Args:
        nyt_data: Full NYT JSON with easy/medium/hard keys, or a single puzzle dict
        difficulty: Which difficulty to parse ("easy", "medium", "hard")
    """
    if difficulty in nyt_data:
        puzzle_data = nyt_data[difficulty]
        print_date = nyt_data.get("printDate", "unknown")
    else:
        puzzle_data = nyt_data
        print_date = puzzle_data.get("printDate", "unknown")

    name = f"NYT {difficulty.capitalize()} - {print_date}"
    return convert_external_puzzle(puzzle_data, name)


def parse_nyt_json_string(json_str: str) -> Dict[str, Puzzle]:
    """
    Parse NYT JSON from a string and return all puzzles it contains.
    """
    try:
        data = json.loads(json_str)
    except ValueError as exc:
        raise ExternalPuzzleError(f"Not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ExternalPuzzleError("Expected a JSON object")

    puzzles = {}
    for difficulty in DIFFICULTIES:
        if difficulty in data:
            puzzles[difficulty] = parse_nyt_puzzle(data, difficulty)
    return puzzles


def parse_nyt_json_file(filepath: str) -> Dict[str, Puzzle]:
    """
    Parse a saved NYT JSON file and return all three puzzles.
    """
    with open(filepath, 'r') as f:
        return parse_nyt_json_string(f.read())
