"""
Compact share tokens for a board and its placed dominoes.

A token is URL-safe base64 (no padding) of a compact JSON envelope::

    {"r": rows, "k": cols,
     "c": [[color, constraint, foundation], ...],   # row-major
     "d": [[id, first, second, orientation, row, col], ...]}

``color`` is 0 for none or 1-6 for the palette; ``constraint`` is
``"s:equal"``, ``"s:notEqual"``, ``"t:<n>"`` style text or null;
``orientation`` is 0 for horizontal and 1 for vertical.

Older tokens have no ``r``/``k`` (the board was always 4x6), no foundation
flag (every cell was playable) and use standard base64.
"""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, List, Optional

from domino_sets import Domino, MAX_PIPS
from grid import (
    Board, Cell, Constraint, ConstraintType, Orientation, PlacedDomino, PALETTE,
    LEGACY_BOARD_ROWS, LEGACY_BOARD_COLS, board_size,
)
from exceptions import DecodeError

COLOR_INDEX = {color: index for index, color in enumerate(PALETTE, start=1)}

SYMBOL_PREFIX = 's:'
TEXT_PREFIX = 't:'


@dataclass
class DecodedPuzzle:
    board: Board
    placed_dominoes: List[PlacedDomino]


def serialize_constraint(constraint: Optional[Constraint]) -> Optional[str]:
    if constraint is None:
        return None
    if constraint.type == ConstraintType.EQUAL:
        return SYMBOL_PREFIX + 'equal'
    if constraint.type == ConstraintType.NOT_EQUAL:
        return SYMBOL_PREFIX + 'notEqual'
    return TEXT_PREFIX + constraint.label()


def deserialize_constraint(text: str) -> Constraint:
    """Parse a constraint string; raises DecodeError on anything unknown."""
    if text.startswith(SYMBOL_PREFIX):
        symbol = text[len(SYMBOL_PREFIX):]
        if symbol == 'equal':
            return Constraint.equal()
        if symbol == 'notEqual':
            return Constraint.not_equal()
        raise DecodeError(f"Unknown constraint symbol {symbol!r}")

    if not text.startswith(TEXT_PREFIX):
        raise DecodeError(f"Unknown constraint encoding {text!r}")
    value = text[len(TEXT_PREFIX):]
    try:
        if value.startswith('<'):
            return Constraint.less_than(int(value[1:]))
        if value.startswith('>'):
            return Constraint.greater_than(int(value[1:]))
        return Constraint.sum(int(value))
    except ValueError as exc:
        raise DecodeError(f"Bad constraint value {value!r}") from exc


def encode_puzzle(board: Board, placed_dominoes: Optional[List[PlacedDomino]] = None) -> str:
    """Serialize a board and its placements into a URL-safe token."""
    rows, cols = board_size(board)
    cells = []
    for r in range(rows):
        for c in range(cols):
            cell = board[r][c]
            color = COLOR_INDEX[cell.region_color] if cell.region_color else 0
            cells.append([color, serialize_constraint(cell.constraint), 1 if cell.is_foundation else 0])

    dominoes = [
        [
            p.domino.id,
            p.domino.first,
            p.domino.second,
            0 if p.orientation == Orientation.HORIZONTAL else 1,
            p.row,
            p.col,
        ]
        for p in placed_dominoes or []
    ]

    payload = json.dumps({'r': rows, 'k': cols, 'c': cells, 'd': dominoes}, separators=(',', ':'))
    return base64.urlsafe_b64encode(payload.encode('utf-8')).decode('ascii').rstrip('=')


def _unwrap(token: str) -> Any:
    text = token.strip().replace('-', '+').replace('_', '/')
    text += '=' * (-len(text) % 4)
    try:
        raw = base64.b64decode(text, validate=True)
        return json.loads(raw.decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise DecodeError(f"Token is not a puzzle: {exc}") from exc


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected an integer for {what}, got {value!r}")
    return value


def _decode_cell(entry: Any) -> Cell:
    if not isinstance(entry, list) or len(entry) < 2:
        raise DecodeError(f"Malformed cell entry {entry!r}")
    color_index = _as_int(entry[0], 'cell color')
    if color_index == 0:
        color = None
    elif 1 <= color_index <= len(PALETTE):
        color = PALETTE[color_index - 1]
    else:
        raise DecodeError(f"Unknown color index {color_index}")

    constraint_text = entry[1]
    if constraint_text is not None and not isinstance(constraint_text, str):
        raise DecodeError(f"Malformed constraint {constraint_text!r}")
    constraint = deserialize_constraint(constraint_text) if constraint_text else None

    if len(entry) > 2:
        flag = _as_int(entry[2], 'foundation flag')
        if flag not in (0, 1):
            raise DecodeError(f"Foundation flag must be 0 or 1, got {flag}")
        is_foundation = flag == 1
    else:
        is_foundation = True
    return Cell(region_color=color, constraint=constraint, is_foundation=is_foundation)


def _as_pip(value: Any, what: str) -> int:
    pip = _as_int(value, what)
    if not 0 <= pip <= MAX_PIPS:
        raise DecodeError(f"{what} {pip} is outside 0-{MAX_PIPS}")
    return pip


def _decode_domino(entry: Any) -> PlacedDomino:
    if not isinstance(entry, list) or len(entry) != 6:
        raise DecodeError(f"Malformed domino entry {entry!r}")
    domino_id, first, second, orientation, row, col = entry
    if not isinstance(domino_id, str):
        raise DecodeError(f"Malformed domino id {domino_id!r}")
    if orientation not in (0, 1) or isinstance(orientation, bool):
        raise DecodeError(f"Unknown orientation {orientation!r}")
    first, second = _as_pip(first, 'first pip'), _as_pip(second, 'second pip')
    if domino_id != f"{min(first, second)}-{max(first, second)}":
        raise DecodeError(f"Domino id {domino_id!r} does not match pips {first}|{second}")
    return PlacedDomino(
        domino=Domino(first, second, domino_id),
        row=_as_int(row, 'row'),
        col=_as_int(col, 'col'),
        orientation=Orientation.HORIZONTAL if orientation == 0 else Orientation.VERTICAL,
    )


def decode_puzzle(token: str) -> DecodedPuzzle:
    """
    Rebuild a board and placements from a token.
    Raises DecodeError for anything that is not a valid token.
    """
    data = _unwrap(token)
    if not isinstance(data, dict) or not isinstance(data.get('c'), list):
        raise DecodeError("Token has no cell list")

    rows = _as_int(data.get('r', LEGACY_BOARD_ROWS), 'rows')
    cols = _as_int(data.get('k', LEGACY_BOARD_COLS), 'cols')
    cells = data['c']
    if rows <= 0 or cols <= 0 or len(cells) != rows * cols:
        raise DecodeError(f"Expected {rows}x{cols} cells, got {len(cells)}")

    board = [
        [_decode_cell(cells[r * cols + c]) for c in range(cols)]
        for r in range(rows)
    ]

    entries = data.get('d') or []
    if not isinstance(entries, list):
        raise DecodeError("Malformed domino list")
    placed = [_decode_domino(entry) for entry in entries]
    return DecodedPuzzle(board=board, placed_dominoes=placed)
