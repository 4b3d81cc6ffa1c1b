# src/campaign_registry/index/bktree.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from campaign_registry.normalization.distance import levenshtein


@dataclass
class BKNode:
    """
    One key of a Burkhard-Keller tree.

    Attributes:
        key: The stored string.
        children: Child nodes keyed by their edit distance to ``key``.
    """

    key: str
    children: Dict[int, "BKNode"] = field(default_factory=dict)


class BKTree:
    """
    Metric index over strings for approximate lookup.

    Every key within distance T of a query lies under children whose edge
    distance d satisfies |distance(query, node.key) - d| <= T, so search
    only descends into that band.
    """

    def __init__(self, distance_fn: Callable[[str, str], int] = levenshtein):
        self.distance_fn = distance_fn
        self.root: Optional[BKNode] = None
        self._size = 0

    @classmethod
    def build(
        cls,
        keys: Iterable[str],
        distance_fn: Callable[[str, str], int] = levenshtein,
    ) -> Optional["BKTree"]:
        """Build a tree from ``keys``; returns None when there are no keys."""
        tree = cls(distance_fn)
        for key in keys:
            tree.insert(key)
        return tree if tree.root is not None else None

    def __len__(self) -> int:
        return self._size

    def insert(self, key: str) -> bool:
        """Insert ``key``. Returns False when it was already present."""
        if self.root is None:
            self.root = BKNode(key)
            self._size = 1
            return True

        node = self.root
        while True:
            d = self.distance_fn(key, node.key)
            if d == 0:
                return False
            child = node.children.get(d)
            if child is None:
                node.children[d] = BKNode(key)
                self._size += 1
                return True
            node = child

    def search(self, query: str, threshold: int) -> List[Tuple[int, str]]:
        """Return ``(distance, key)`` for every key within ``threshold`` of ``query``."""
        if self.root is None:
            return []

        results: List[Tuple[int, str]] = []
        stack: List[BKNode] = [self.root]
        while stack:
            node = stack.pop()
            d = self.distance_fn(query, node.key)
            if d <= threshold:
                results.append((d, node.key))

            low, high = d - threshold, d + threshold
            for edge, child in node.children.items():
                if low <= edge <= high:
                    stack.append(child)

        return results

    def keys(self) -> List[str]:
        out: List[str] = []
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            out.append(node.key)
            stack.extend(node.children.values())
        return out


def search_tree(tree: Optional[BKTree], query: str, threshold: int) -> List[Tuple[int, str]]:
    """Null-safe search: an absent tree has no matches."""
    if tree is None:
        return []
    return tree.search(query, threshold)
