# tests/test_distance.py

from __future__ import annotations

from campaign_registry.normalization import distance, levenshtein


def test_levenshtein_known_values() -> None:
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("flaw", "lawn") == 2
    assert levenshtein("praha", "praze") == 2
    assert levenshtein("novák", "novak") == 1


def test_levenshtein_empty_and_identical() -> None:
    assert levenshtein("", "") == 0
    assert levenshtein("", "abc") == 3
    assert levenshtein("abc", "") == 3
    assert levenshtein("brno", "brno") == 0


def test_levenshtein_is_symmetric() -> None:
    pairs = [("vyšehrad", "vyšehrat"), ("olga", "olze"), ("a", "xyz"), ("honza", "honzovi")]
    for a, b in pairs:
        assert levenshtein(a, b) == levenshtein(b, a)


def test_distance_alias() -> None:
    assert distance is levenshtein
