# src/campaign_registry/normalization/distance.py

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """
    Classic Levenshtein edit distance (insert / delete / substitute, cost 1).

    Two-row dynamic programming: O(len(a) * len(b)) time and
    O(min(len(a), len(b))) extra space, the shorter string indexing the rows.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,         # deletion
                    current[j - 1] + 1,      # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current

    return previous[-1]


# Short alias used by the index and resolver.
distance = levenshtein
