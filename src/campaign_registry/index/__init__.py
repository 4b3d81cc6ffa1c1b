"""
Public interface for name indexing and resolution.

    from campaign_registry.index import build_name_index, resolve, ResolutionCache

    index = build_name_index(registry.named_identities())
    owner = resolve("Nováka", index, kind="character", cache=ResolutionCache())
"""

from __future__ import annotations

from .bktree import BKNode, BKTree, search_tree
from .name_index import (
    PRIORITY_FULL_NAME,
    PRIORITY_WORD,
    IndexEntry,
    NameIndex,
    build_name_index,
    normalize_token,
)
from .resolver import (
    ALL_STAGES,
    NON_FUZZY_STAGES,
    CacheState,
    CacheValue,
    Resolution,
    ResolutionCache,
    fuzzy_threshold,
    require_resolved,
    resolve,
    resolve_detailed,
)

__all__ = [
    "ALL_STAGES",
    "BKNode",
    "BKTree",
    "CacheState",
    "CacheValue",
    "IndexEntry",
    "NON_FUZZY_STAGES",
    "NameIndex",
    "PRIORITY_FULL_NAME",
    "PRIORITY_WORD",
    "Resolution",
    "ResolutionCache",
    "build_name_index",
    "fuzzy_threshold",
    "normalize_token",
    "require_resolved",
    "resolve",
    "resolve_detailed",
    "search_tree",
]
