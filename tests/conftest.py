"""
Shared fixtures for the puzzle engine tests.
"""
import os
import random
import sys

import pytest

# Add parent directory to path to import the engine modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domino_sets import Domino
from grid import Cell, Orientation, PlacedDomino


@pytest.fixture
def rng():
    """A seeded random stream so every test is reproducible."""
    return random.Random(1234)


@pytest.fixture
def make_board():
    """
    Build a board from rows of color letters: '.' is void, 'o' is
    colorless foundation and any other letter picks a palette color.
    """
    letters = {'O': 'orange', 'B': 'blue', 'P': 'pink', 'T': 'teal', 'U': 'purple', 'G': 'green'}

    def build(*rows):
        board = []
        for line in rows:
            row = []
            for mark in line:
                if mark == '.':
                    row.append(Cell())
                elif mark == 'o':
                    row.append(Cell(is_foundation=True))
                else:
                    row.append(Cell(region_color=letters[mark], is_foundation=True))
            board.append(row)
        return board

    return build


def horizontal(first, second, row, col):
    return PlacedDomino(Domino(first, second), row, col, Orientation.HORIZONTAL)


def vertical(first, second, row, col):
    return PlacedDomino(Domino(first, second), row, col, Orientation.VERTICAL)
