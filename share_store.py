"""
Write-once store mapping short share codes to a board and its placements.
"""
import copy
import random
import string
from dataclasses import dataclass
from typing import Dict, List, Optional

from grid import Board, PlacedDomino

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


@dataclass(frozen=True)
class SharedPuzzle:
    board: Board
    placed_dominoes: List[PlacedDomino]


class ShareStore:
    """In-memory share store; codes are never reused, updated or deleted."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._entries: Dict[str, SharedPuzzle] = {}

    def _new_code(self) -> str:
        return ''.join(self.rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))

    def save(self, board: Board, placed_dominoes: List[PlacedDomino]) -> str:
        """Store a snapshot and return its code."""
        code = self._new_code()
        while code in self._entries:
            code = self._new_code()
        self._entries[code] = SharedPuzzle(copy.deepcopy(board), list(placed_dominoes))
        return code

    @staticmethod
    def normalize(code: str) -> str:
        """Codes are matched without surrounding whitespace or case."""
        return code.strip().upper()

    def load(self, code: str) -> Optional[SharedPuzzle]:
        return self._entries.get(self.normalize(code))

    def __contains__(self, code: str) -> bool:
        return self.normalize(code) in self._entries

    def __len__(self):
        return len(self._entries)
