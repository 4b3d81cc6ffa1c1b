# tests/test_bktree.py

from __future__ import annotations

from campaign_registry.index.bktree import BKTree, search_tree
from campaign_registry.normalization import levenshtein

KEYS = [
    "praha", "brno", "olga", "novák", "jan novák", "honza", "karel", "karel veselý",
    "vyšehrad", "česko", "ostrava", "plzeň", "petr", "svoboda", "rudá ruka", "rudá",
    "ruka", "péťa", "meč", "brna", "prah",
]

QUERIES = ["praze", "brně", "olze", "nowak", "karell", "vyšehrat", "x", "", "rudá ruka", "svobodova"]


def _linear(query: str, threshold: int):
    return {(levenshtein(query, k), k) for k in KEYS if levenshtein(query, k) <= threshold}


def test_search_matches_brute_force_scan() -> None:
    """Tree search returns exactly the keys a linear scan with the same threshold returns."""
    tree = BKTree.build(KEYS)
    for query in QUERIES:
        for threshold in range(0, 5):
            assert set(tree.search(query, threshold)) == _linear(query, threshold), (query, threshold)


def test_insert_order_does_not_change_results() -> None:
    forward = BKTree.build(KEYS)
    backward = BKTree.build(list(reversed(KEYS)))
    for query in QUERIES:
        assert set(forward.search(query, 2)) == set(backward.search(query, 2))


def test_duplicate_insert_is_a_no_op() -> None:
    tree = BKTree.build(["praha", "brno"])
    assert len(tree) == 2
    assert tree.insert("praha") is False
    assert len(tree) == 2
    assert sorted(tree.keys()) == ["brno", "praha"]


def test_empty_tree() -> None:
    assert BKTree.build([]) is None
    assert search_tree(None, "praha", 3) == []
    assert BKTree().search("praha", 3) == []
