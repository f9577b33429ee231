"""
Domino set definitions and utilities.
"""
from dataclasses import dataclass
from typing import List, Optional
import random

MAX_PIPS = 6


@dataclass(frozen=True)
class Domino:
    """
    A domino tile with two pip values.

    ``first`` and ``second`` keep the order the pips are shown in, so a
    rotated domino compares unequal to its unrotated self. ``id`` is the
    canonical "low-high" name and is shared by both orientations.
    """
    first: int
    second: int
    id: Optional[str] = None

    def __post_init__(self):
        if self.id is None:
            object.__setattr__(self, 'id', f"{self.low}-{self.high}")

    @property
    def low(self) -> int:
        return min(self.first, self.second)

    @property
    def high(self) -> int:
        return max(self.first, self.second)

    @property
    def pips(self) -> int:
        """Total pip count."""
        return self.first + self.second

    @property
    def is_double(self) -> bool:
        """Check if this is a double."""
        return self.first == self.second

    def flipped(self) -> 'Domino':
        """Return the same tile with its halves swapped."""
        return Domino(self.second, self.first, self.id)

    def canonical(self) -> 'Domino':
        """Return the tile with the lower pip first."""
        return Domino(self.low, self.high, self.id)

    def __repr__(self):
        return f"[{self.first}|{self.second}]"


class DominoSet:
    """A collection of dominoes."""

    def __init__(self, dominoes: List[Domino] = None):
        self.dominoes = list(dominoes) if dominoes else []

    @classmethod
    def double_six(cls) -> 'DominoSet':
        """Create a standard double-six set (28 tiles, 0-6)."""
        dominoes = []
        for i in range(MAX_PIPS + 1):
            for j in range(i, MAX_PIPS + 1):
                dominoes.append(Domino(i, j))
        return cls(dominoes)

    def shuffled(self, rng: random.Random) -> 'DominoSet':
        """Return a new set with shuffled order."""
        shuffled = self.dominoes.copy()
        rng.shuffle(shuffled)
        return DominoSet(shuffled)

    def __len__(self):
        return len(self.dominoes)

    def __iter__(self):
        return iter(self.dominoes)

    def __repr__(self):
        return f"DominoSet({len(self.dominoes)} tiles)"

    def display(self):
        """Pretty print the domino set."""
        for i, d in enumerate(self.dominoes):
            print(f"{d}", end="  ")
            if (i + 1) % 7 == 0:
                print()
        print()
