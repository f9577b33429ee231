"""
Board model for domino placement puzzles: cells, constraints, placed
dominoes and connected-region discovery.
"""
from dataclasses import dataclass
from typing import List, Dict, Iterable, Optional, Sequence, Tuple
from enum import Enum

from domino_sets import Domino

Coord = Tuple[int, int]

# Playable area used by the generator and the importer
WORK_GRID_ROWS = 8
WORK_GRID_COLS = 10

# Fixed board size of share tokens that predate explicit dimensions
LEGACY_BOARD_ROWS = 4
LEGACY_BOARD_COLS = 6

PALETTE: Tuple[str, ...] = ('orange', 'blue', 'pink', 'teal', 'purple', 'green')

ORTHOGONAL_STEPS: Tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Orientation(Enum):
    HORIZONTAL = 'horizontal'  # Domino spans (r,c) and (r,c+1)
    VERTICAL = 'vertical'      # Domino spans (r,c) and (r+1,c)


@dataclass(frozen=True)
class PlacedDomino:
    """A domino placed on the grid. ``first`` sits on the anchor cell."""
    domino: Domino
    row: int
    col: int
    orientation: Orientation

    def cells(self) -> Tuple[Coord, Coord]:
        """Return the two cells this domino occupies."""
        if self.orientation == Orientation.HORIZONTAL:
            return ((self.row, self.col), (self.row, self.col + 1))
        else:
            return ((self.row, self.col), (self.row + 1, self.col))

    def cell_values(self) -> Tuple[Tuple[Coord, int], Tuple[Coord, int]]:
        """Return ((cell, pip), (cell, pip)) for the anchor and the extension."""
        anchor, extension = self.cells()
        return ((anchor, self.domino.first), (extension, self.domino.second))


class ConstraintType(Enum):
    SUM = 'sum'             # Total pips = target value
    EQUAL = 'equal'         # All pips in region are the same value
    NOT_EQUAL = 'notEqual'  # At least one pip differs from the others
    GREATER = 'greater'     # Total pips > target value
    LESS = 'less'           # Total pips < target value


@dataclass(frozen=True)
class Constraint:
    """A rule on the pip values covering one region."""
    type: ConstraintType
    target: Optional[int] = None

    @classmethod
    def equal(cls) -> 'Constraint':
        return cls(ConstraintType.EQUAL)

    @classmethod
    def not_equal(cls) -> 'Constraint':
        return cls(ConstraintType.NOT_EQUAL)

    @classmethod
    def sum(cls, target: int) -> 'Constraint':
        return cls(ConstraintType.SUM, target)

    @classmethod
    def less_than(cls, target: int) -> 'Constraint':
        return cls(ConstraintType.LESS, target)

    @classmethod
    def greater_than(cls, target: int) -> 'Constraint':
        return cls(ConstraintType.GREATER, target)

    def is_satisfied(self, values: Sequence[int]) -> bool:
        """
        Check a complete region. Inequalities compare the region's sum,
        the same quantity the generator derives them from.
        """
        if self.type == ConstraintType.EQUAL:
            return len(set(values)) <= 1
        if self.type == ConstraintType.NOT_EQUAL:
            return len(set(values)) > 1
        total = sum(values)
        if self.type == ConstraintType.SUM:
            return total == self.target
        if self.type == ConstraintType.LESS:
            return total < self.target
        return total > self.target

    def label(self) -> str:
        """Short text shown in the region's diamond."""
        if self.type == ConstraintType.EQUAL:
            return '='
        if self.type == ConstraintType.NOT_EQUAL:
            return '!='
        if self.type == ConstraintType.LESS:
            return f'<{self.target}'
        if self.type == ConstraintType.GREATER:
            return f'>{self.target}'
        return str(self.target)


@dataclass
class Cell:
    """One square of the board."""
    region_color: Optional[str] = None
    constraint: Optional[Constraint] = None
    is_foundation: bool = False


Board = List[List[Cell]]


def empty_board(rows: int = WORK_GRID_ROWS, cols: int = WORK_GRID_COLS) -> Board:
    """Create a board of void cells."""
    return [[Cell() for _ in range(cols)] for _ in range(rows)]


def board_size(board: Board) -> Tuple[int, int]:
    rows = len(board)
    cols = len(board[0]) if rows else 0
    return rows, cols


def cell_key(row: int, col: int) -> str:
    """Key used for a cell in validation results."""
    return f"{row}-{col}"


def neighbors(cell: Coord) -> Iterable[Coord]:
    r, c = cell
    for dr, dc in ORTHOGONAL_STEPS:
        yield (r + dr, c + dc)


def connected_components(cells: Iterable[Coord]) -> List[List[Coord]]:
    """Split a cell set into 4-connected components, each sorted row-major."""
    remaining = set(cells)
    components: List[List[Coord]] = []
    for start in sorted(remaining):
        if start not in remaining:
            continue
        remaining.discard(start)
        component = [start]
        stack = [start]
        while stack:
            cell = stack.pop()
            for n in neighbors(cell):
                if n in remaining:
                    remaining.discard(n)
                    component.append(n)
                    stack.append(n)
        components.append(sorted(component))
    return components


@dataclass
class Region:
    """A connected group of same-colored cells sharing one constraint."""
    cells: List[Coord]
    display_cell: Coord
    color: str
    constraint: Optional[Constraint] = None

    def size(self) -> int:
        return len(self.cells)


def find_display_cell(cells: Iterable[Coord]) -> Coord:
    """The bottom-most, then right-most cell of a region."""
    return max(cells)


def _flood_fill(board: Board, start: Coord, visited: List[List[bool]]) -> List[Coord]:
    rows, cols = board_size(board)
    color = board[start[0]][start[1]].region_color
    cells: List[Coord] = []
    stack = [start]
    while stack:
        r, c = stack.pop()
        if r < 0 or r >= rows or c < 0 or c >= cols:
            continue
        if visited[r][c] or board[r][c].region_color != color:
            continue
        visited[r][c] = True
        cells.append((r, c))
        stack.extend(neighbors((r, c)))
    return cells


def find_regions(board: Board) -> List[Region]:
    """
    Find every connected region of colored cells.
    Each region picks up the first constraint stored on any of its cells.
    """
    rows, cols = board_size(board)
    visited = [[False] * cols for _ in range(rows)]
    regions: List[Region] = []

    for r in range(rows):
        for c in range(cols):
            if visited[r][c] or not board[r][c].region_color:
                continue
            cells = _flood_fill(board, (r, c), visited)
            constraint = None
            for cr, cc in cells:
                if board[cr][cc].constraint is not None:
                    constraint = board[cr][cc].constraint
                    break
            regions.append(Region(
                cells=cells,
                display_cell=find_display_cell(cells),
                color=board[r][c].region_color,
                constraint=constraint,
            ))

    return regions


@dataclass
class Puzzle:
    """A complete generated or imported puzzle."""
    board: Board
    solution_dominoes: List[Domino]
    solution_placements: List[PlacedDomino]
    name: str = "Random"
    seed: Optional[int] = None

    @property
    def rows(self) -> int:
        return board_size(self.board)[0]

    @property
    def cols(self) -> int:
        return board_size(self.board)[1]

    def foundation_cells(self) -> List[Coord]:
        return [
            (r, c)
            for r, row in enumerate(self.board)
            for c, cell in enumerate(row)
            if cell.is_foundation
        ]


def placement_values(placed: Iterable[PlacedDomino]) -> Dict[Coord, int]:
    """Map every covered cell to the pip shown on it."""
    values: Dict[Coord, int] = {}
    for p in placed:
        for cell, pip in p.cell_values():
            values[cell] = pip
    return values
