"""
Backtracking assignment of double-six dominoes to tiling slots.

Without hints any assignment works, so the search succeeds on the first
branch. With hints, partial pip totals are tracked per hinted region and a
branch is cut as soon as a hinted constraint can no longer be met.
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
import random

from domino_sets import Domino, DominoSet, MAX_PIPS
from grid import Constraint, ConstraintType, Coord
from tiler import Slot
from logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MAX_NODES = 50_000


@dataclass
class AssignmentResult:
    """Dominoes aligned 1:1 with the slots, first pip on the slot anchor."""
    dominoes: List[Domino]
    hints_enforced: bool = False


class SearchExhausted(Exception):
    """Raised when the hint-aware search runs past its node budget."""


class AssignmentSolver:
    """
    Places each piece of the set at most once, trying both pip orders.
    """

    def __init__(
        self,
        slots: List[Slot],
        rng: random.Random,
        region_of: Optional[Dict[Coord, int]] = None,
        region_hints: Optional[Dict[int, Constraint]] = None,
        max_nodes: int = DEFAULT_MAX_NODES,
        domino_set: Optional[DominoSet] = None,
    ):
        self.slots = slots
        self.pieces = (domino_set or DominoSet.double_six()).shuffled(rng).dominoes
        self.region_of = region_of or {}
        self.region_hints = region_hints or {}
        self.max_nodes = max_nodes
        self.nodes = 0

        self.orientations: List[List[Tuple[int, int]]] = []
        for piece in self.pieces:
            pairs = [(piece.first, piece.second)]
            if not piece.is_double:
                pairs.append((piece.second, piece.first))
                rng.shuffle(pairs)
            self.orientations.append(pairs)

        # Working buffers, pushed and popped as the search moves
        self.region_size: Dict[int, int] = {rid: 0 for rid in self.region_hints}
        for cell, rid in self.region_of.items():
            if rid in self.region_size:
                self.region_size[rid] += 1
        self.region_values: Dict[int, List[int]] = {rid: [] for rid in self.region_hints}
        self.region_sum: Dict[int, int] = {rid: 0 for rid in self.region_hints}
        self.used = [False] * len(self.pieces)
        self.assigned: List[Optional[Domino]] = [None] * len(slots)

        # Slots touching hinted regions go first so dead ends surface early
        def touches_hint(index: int) -> bool:
            return any(self._hinted_region(cell) is not None for cell in slots[index].cells())

        self.order = sorted(range(len(slots)), key=lambda i: not touches_hint(i))

    def _hinted_region(self, cell: Coord) -> Optional[int]:
        rid = self.region_of.get(cell)
        if rid in self.region_hints:
            return rid
        return None

    def _push(self, slot: Slot, first: int, second: int) -> bool:
        """Record pips for a slot; return False if a hinted region breaks."""
        touched = []
        for cell, pip in ((slot.anchor, first), (slot.other, second)):
            rid = self._hinted_region(cell)
            if rid is None:
                continue
            self.region_values[rid].append(pip)
            self.region_sum[rid] += pip
            touched.append(rid)
        return all(self._feasible(rid) for rid in touched)

    def _pop(self, slot: Slot, first: int, second: int) -> None:
        for cell, pip in ((slot.anchor, first), (slot.other, second)):
            rid = self._hinted_region(cell)
            if rid is None:
                continue
            self.region_values[rid].pop()
            self.region_sum[rid] -= pip

    def _feasible(self, rid: int) -> bool:
        """Can the hinted region still satisfy its constraint?"""
        constraint = self.region_hints[rid]
        values = self.region_values[rid]
        remaining = self.region_size[rid] - len(values)
        total = self.region_sum[rid]

        if constraint.type == ConstraintType.EQUAL:
            return all(v == values[0] for v in values)
        if constraint.type == ConstraintType.NOT_EQUAL:
            return remaining > 0 or len(set(values)) > 1
        if constraint.type == ConstraintType.SUM:
            return total <= constraint.target <= total + MAX_PIPS * remaining
        if constraint.type == ConstraintType.LESS:
            return total < constraint.target
        return total + MAX_PIPS * remaining > constraint.target

    def solve(self) -> Optional[List[Domino]]:
        """
        Return dominoes aligned with the slots, or None if no assignment
        exists. Raises SearchExhausted when hinted search hits the budget.
        """
        if len(self.slots) > len(self.pieces):
            return None
        if self._backtrack(0):
            return list(self.assigned)
        return None

    def _backtrack(self, depth: int) -> bool:
        if depth == len(self.order):
            return True

        slot_index = self.order[depth]
        slot = self.slots[slot_index]

        for piece_index, piece in enumerate(self.pieces):
            if self.used[piece_index]:
                continue

            for first, second in self.orientations[piece_index]:
                self.nodes += 1
                if self.region_hints and self.nodes > self.max_nodes:
                    raise SearchExhausted(f"gave up after {self.max_nodes} nodes")

                if self._push(slot, first, second):
                    self.used[piece_index] = True
                    self.assigned[slot_index] = Domino(first, second, piece.id)

                    if self._backtrack(depth + 1):
                        return True

                    self.used[piece_index] = False
                    self.assigned[slot_index] = None
                self._pop(slot, first, second)

        return False


def assign_dominoes(
    slots: List[Slot],
    rng: random.Random,
    region_of: Optional[Dict[Coord, int]] = None,
    region_hints: Optional[Dict[int, Constraint]] = None,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> Optional[AssignmentResult]:
    """
    Assign a distinct double-six domino to every slot.

    When ``region_hints`` is given the hinted constraints are enforced if
    possible; otherwise the plain assignment is returned and
    ``hints_enforced`` is False. Returns None only when there are more
    slots than dominoes.
    """
    if len(slots) > len(DominoSet.double_six()):
        return None

    if region_hints:
        solver = AssignmentSolver(slots, rng, region_of, region_hints, max_nodes)
        try:
            dominoes = solver.solve()
        except SearchExhausted:
            dominoes = None
            LOGGER.warning("Hint search exhausted after %d nodes", solver.max_nodes)
        if dominoes is not None:
            return AssignmentResult(dominoes, hints_enforced=True)
        LOGGER.warning("Dropping %d hint constraint(s); assigning without them", len(region_hints))

    dominoes = AssignmentSolver(slots, rng).solve()
    if dominoes is None:
        return None
    return AssignmentResult(dominoes, hints_enforced=False)
