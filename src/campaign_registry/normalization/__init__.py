"""
String-level helpers shared by the name index and resolver.
"""

from .distance import distance, levenshtein
from .morphology import alternation_candidates, stem

__all__ = [
    "alternation_candidates",
    "distance",
    "levenshtein",
    "stem",
]
