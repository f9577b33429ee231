"""
Unit tests for the union-find structure used by region growing.
"""
from disjoint_set import DisjointSet


class TestDisjointSet:

    def test_starts_as_singletons(self):
        ds = DisjointSet(["a", "b", "c"])
        assert ds.num_sets() == 3
        assert ds.set_size("a") == 1
        assert not ds.connected("a", "b")

    def test_union_merges_and_tracks_size(self):
        ds = DisjointSet(range(5))
        assert ds.union(0, 1)
        assert ds.union(1, 2)
        assert ds.connected(0, 2)
        assert ds.set_size(2) == 3
        assert ds.num_sets() == 3

    def test_union_of_same_set_is_noop(self):
        ds = DisjointSet(range(3))
        ds.union(0, 1)
        assert not ds.union(1, 0)
        assert ds.num_sets() == 2

    def test_find_adds_unknown_items(self):
        ds = DisjointSet()
        assert ds.find("x") == "x"
        assert ds.num_sets() == 1

    def test_get_sets_and_roots(self):
        ds = DisjointSet(range(6))
        ds.union(0, 1)
        ds.union(2, 3)
        ds.union(3, 4)
        groups = sorted(sorted(members) for members in ds.get_sets().values())
        assert groups == [[0, 1], [2, 3, 4], [5]]
        assert ds.num_sets() == 3

    def test_long_chain_compresses(self):
        ds = DisjointSet(range(1000))
        for i in range(999):
            ds.union(i, i + 1)
        root = ds.find(0)
        assert all(ds.find(i) == root for i in range(1000))
        assert ds.set_size(500) == 1000
