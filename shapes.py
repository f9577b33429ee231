"""
Curated foundation templates.

Each template is a small bitmap ('#' = foundation, '.' = void). Hints name
template cells whose region should end up with a particular constraint;
the generator enforces them when the domino search allows it.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from grid import Constraint, Coord


@dataclass(frozen=True)
class Hint:
    """A suggested constraint for the region covering ``cells``."""
    cells: Tuple[Coord, ...]
    constraint: Constraint

    def shifted(self, dr: int, dc: int) -> 'Hint':
        return Hint(tuple((r + dr, c + dc) for r, c in self.cells), self.constraint)


@dataclass(frozen=True)
class ShapeTemplate:
    name: str
    bitmap: Tuple[str, ...]
    hints: Tuple[Hint, ...] = ()

    @property
    def height(self) -> int:
        return len(self.bitmap)

    @property
    def width(self) -> int:
        return max(len(line) for line in self.bitmap)

    def cells(self) -> FrozenSet[Coord]:
        return frozenset(
            (r, c)
            for r, line in enumerate(self.bitmap)
            for c, mark in enumerate(line)
            if mark == '#'
        )


TEMPLATES: Tuple[ShapeTemplate, ...] = (
    ShapeTemplate(
        name='plus',
        bitmap=(
            '..##..',
            '..##..',
            '######',
            '######',
            '..##..',
            '..##..',
        ),
        hints=(
            Hint(((2, 2), (2, 3), (3, 2), (3, 3)), Constraint.sum(12)),
        ),
    ),
    ShapeTemplate(
        name='heart',
        bitmap=(
            '.##..##.',
            '########',
            '########',
            '.######.',
            '..####..',
            '...##...',
        ),
        hints=(
            Hint(((5, 3), (5, 4)), Constraint.sum(12)),
            Hint(((0, 1), (0, 2)), Constraint.equal()),
        ),
    ),
    ShapeTemplate(
        name='diamond',
        bitmap=(
            '...##...',
            '..####..',
            '.######.',
            '########',
            '.######.',
            '..####..',
            '...##...',
        ),
        hints=(
            Hint(((3, 3), (3, 4)), Constraint.equal()),
        ),
    ),
    ShapeTemplate(
        name='arrow',
        bitmap=(
            '...##.....',
            '...####...',
            '##########',
            '##########',
            '...####...',
            '...##.....',
        ),
        hints=(
            Hint(((2, 9), (3, 9)), Constraint.greater_than(9)),
        ),
    ),
    ShapeTemplate(
        name='letter_h',
        bitmap=(
            '##....##',
            '##....##',
            '########',
            '########',
            '##....##',
            '##....##',
        ),
        hints=(
            Hint(((2, 3), (2, 4), (3, 3), (3, 4)), Constraint.sum(10)),
        ),
    ),
    ShapeTemplate(
        name='stairs',
        bitmap=(
            '##......',
            '####....',
            '..####..',
            '....####',
            '......##',
        ),
    ),
    ShapeTemplate(
        name='ring',
        bitmap=(
            '########',
            '##....##',
            '##....##',
            '########',
        ),
        hints=(
            Hint(((0, 0), (0, 1)), Constraint.equal()),
        ),
    ),
    ShapeTemplate(
        name='twin_islands',
        bitmap=(
            '####..####',
            '####..####',
            '##......##',
        ),
    ),
    ShapeTemplate(
        name='zigzag',
        bitmap=(
            '####....',
            '.####...',
            '..####..',
            '...####.',
            '....####',
        ),
        hints=(
            Hint(((2, 2), (2, 3)), Constraint.not_equal()),
        ),
    ),
    ShapeTemplate(
        name='flag',
        bitmap=(
            '######',
            '######',
            '######',
            '#.....',
        ),
    ),
    ShapeTemplate(
        name='castle',
        bitmap=(
            '##..##..##',
            '##########',
            '##########',
            '..######..',
        ),
        hints=(
            Hint(((3, 4), (3, 5)), Constraint.sum(7)),
        ),
    ),
    ShapeTemplate(
        name='boat',
        bitmap=(
            '....##....',
            '....##....',
            '##########',
            '.########.',
            '..######..',
        ),
        hints=(
            Hint(((0, 4), (0, 5), (1, 4), (1, 5)), Constraint.sum(14)),
        ),
    ),
)

TEMPLATES_BY_NAME: Dict[str, ShapeTemplate] = {t.name: t for t in TEMPLATES}

# Always tileable; used when a shape cannot be repaired
FALLBACK_TEMPLATE = TEMPLATES_BY_NAME['plus']
