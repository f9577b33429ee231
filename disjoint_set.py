"""
Disjoint Set (Union-Find) data structure for growing puzzle regions.
"""
from typing import Dict, Hashable, Iterable, Set


class DisjointSet:
    """
    Union-Find with iterative path compression and union by size.
    Set sizes are tracked so callers can cap how large a region may grow.
    """

    def __init__(self, items: Iterable[Hashable] = ()):
        self.parent: Dict[Hashable, Hashable] = {}
        self.size: Dict[Hashable, int] = {}
        for item in items:
            self.make_set(item)

    def make_set(self, x: Hashable) -> None:
        """Create a new set containing only x."""
        if x not in self.parent:
            self.parent[x] = x
            self.size[x] = 1

    def find(self, x: Hashable) -> Hashable:
        """Find the representative of x's set, compressing the path."""
        if x not in self.parent:
            self.make_set(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: Hashable, y: Hashable) -> bool:
        """
        Merge the sets containing x and y.
        Returns True if they were in different sets, False if already same set.
        """
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return False

        if self.size[root_x] < self.size[root_y]:
            root_x, root_y = root_y, root_x
        self.parent[root_y] = root_x
        self.size[root_x] += self.size.pop(root_y)
        return True

    def connected(self, x: Hashable, y: Hashable) -> bool:
        """Check if x and y are in the same set."""
        return self.find(x) == self.find(y)

    def set_size(self, x: Hashable) -> int:
        """Return the size of x's set."""
        return self.size[self.find(x)]

    def get_sets(self) -> Dict[Hashable, Set[Hashable]]:
        """Return all sets as a dict mapping representative -> members."""
        sets: Dict[Hashable, Set[Hashable]] = {}
        for x in self.parent:
            sets.setdefault(self.find(x), set()).add(x)
        return sets

    def num_sets(self) -> int:
        """Return the number of disjoint sets."""
        return len(self.size)
