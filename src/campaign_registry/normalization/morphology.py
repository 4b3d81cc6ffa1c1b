"""
Czech noun declension helpers for name lookup.

This is a fixed rule table, not a linguistic engine:

- ``stem`` strips one case ending so that declined forms of a proper name
  ("Nováka", "Novákovi", "Novákem") collapse onto the same key.
- ``alternation_candidates`` undoes the consonant softening that happens in
  dative/locative forms ("v Praze" -> "Praha", "Olze" -> "Olga"), which plain
  suffix stripping cannot recover.

Both functions expect lowercase input; the index and resolver lowercase
everything before calling them.
"""

from __future__ import annotations

from typing import List, Tuple

MIN_STEM_LENGTH = 3

# Longest first. Matching stops at the first (longest) suffix that fits.
SUFFIXES: Tuple[str, ...] = tuple(
    sorted(
        (
            # adjectival / possessive surname endings
            "ového", "ovému", "ovými", "ových",
            "ovou", "ovým", "ovi", "ová", "ovo", "ovy", "ův",
            # hard and soft noun endings
            "ého", "ému", "ými", "ých", "ích", "ími", "ách", "ech",
            "ům", "ám", "ou", "em", "ím",
            "a", "e", "ě", "i", "í", "o", "u", "y", "ý", "é",
        ),
        key=len,
        reverse=True,
    )
)

# (softened ending, base-form ending)
ALTERNATIONS: Tuple[Tuple[str, str], ...] = (
    ("ze", "ha"),   # Praha -> v Praze
    ("ze", "ga"),   # Olga -> Olze
    ("ce", "ka"),   # Blanka -> Blance
    ("še", "cha"),  # Moucha -> Mouše
    ("ře", "ra"),   # Petra -> Petře
    ("ně", "na"),   # Jana -> Janě
    ("ně", "no"),   # Brno -> v Brně
    ("tě", "ta"),   # Markéta -> Markétě
    ("dě", "da"),   # Lada -> Ladě
    ("vě", "va"),   # Eva -> Evě
    ("ci", "k"),    # Polák -> Poláci
    ("zi", "h"),    # Vlah -> Vlazi
)


def stem(text: str) -> str:
    """
    Strip the single longest matching case ending.

    Returns the input unchanged when no ending matches, or when removing the
    longest matching ending would leave fewer than three characters.
    """
    for suffix in SUFFIXES:
        if text.endswith(suffix):
            if len(text) - len(suffix) < MIN_STEM_LENGTH:
                return text
            return text[: -len(suffix)]
    return text


def alternation_candidates(text: str) -> List[str]:
    """Every base form obtainable by reversing one softened ending."""
    out: List[str] = []
    for softened, base in ALTERNATIONS:
        if text.endswith(softened) and len(text) > len(softened):
            candidate = text[: -len(softened)] + base
            if candidate not in out:
                out.append(candidate)
    return out
