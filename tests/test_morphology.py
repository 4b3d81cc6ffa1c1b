# tests/test_morphology.py

from __future__ import annotations

from campaign_registry.normalization import alternation_candidates, stem
from campaign_registry.normalization.morphology import MIN_STEM_LENGTH, SUFFIXES


def test_declined_surname_forms_share_a_stem() -> None:
    """Genitive, dative and instrumental forms of a surname collapse onto one key."""
    forms = ["novák", "nováka", "novákovi", "novákem"]
    assert {stem(f) for f in forms} == {"novák"}


def test_longest_suffix_wins() -> None:
    # "ovi" must win over "i"
    assert stem("honzovi") == "honz"
    assert stem("honza") == "honz"


def test_stem_refuses_to_leave_fewer_than_three_characters() -> None:
    assert stem("eva") == "eva"
    assert stem("ema") == "ema"
    assert len(stem("olga")) >= MIN_STEM_LENGTH


def test_stem_without_matching_suffix_is_identity() -> None:
    assert stem("vyšehrad") == "vyšehrad"
    assert stem("") == ""


def test_suffix_table_is_longest_first_without_duplicates() -> None:
    lengths = [len(s) for s in SUFFIXES]
    assert lengths == sorted(lengths, reverse=True)
    assert len(set(SUFFIXES)) == len(SUFFIXES)


def test_alternation_recovers_base_forms() -> None:
    assert alternation_candidates("praze") == ["praha", "praga"]
    assert "olga" in alternation_candidates("olze")
    assert alternation_candidates("brně") == ["brna", "brno"]
    assert alternation_candidates("poláci") == ["polák"]


def test_alternation_without_softened_ending() -> None:
    assert alternation_candidates("brno") == []
    # the ending alone is not a word
    assert alternation_candidates("ze") == []
