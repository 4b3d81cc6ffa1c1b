"""
Cascading name resolution against a NameIndex.

Stages, first success wins:

    exact        case-insensitive token lookup
    stem         tokens sharing the query's declension stem
    alternation  base forms recovered from consonant softening
    fuzzy        minimum edit distance within a length-dependent threshold

Ambiguous tokens never resolve through the first three stages. At the fuzzy
stage they are penalized by one edit; when an ambiguous token is still the
closest match the query is left unresolved rather than guessing an owner.

Failure is a ``None`` result. Callers that need a hard failure use
``require_resolved``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from campaign_registry.core.exceptions import UnresolvedReferenceError
from campaign_registry.index.name_index import IndexEntry, NameIndex, normalize_token
from campaign_registry.logging import get_logger
from campaign_registry.normalization.distance import levenshtein
from campaign_registry.normalization.morphology import alternation_candidates, stem
from campaign_registry.registry.entities import IdentityKind, Nameable

log = get_logger("resolver")

STAGE_EXACT = "exact"
STAGE_STEM = "stem"
STAGE_ALTERNATION = "alternation"
STAGE_FUZZY = "fuzzy"

ALL_STAGES: Tuple[str, ...] = (STAGE_EXACT, STAGE_STEM, STAGE_ALTERNATION, STAGE_FUZZY)
NON_FUZZY_STAGES: Tuple[str, ...] = (STAGE_EXACT, STAGE_STEM, STAGE_ALTERNATION)

AMBIGUITY_PENALTY = 1

KindFilter = Union[None, IdentityKind, str, Iterable[Union[IdentityKind, str]]]


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class CacheState(Enum):
    UNKNOWN = "unknown"
    MISS = "miss"
    HIT = "hit"


@dataclass(frozen=True)
class CacheValue:
    state: CacheState
    owner: Optional[Nameable] = None


UNKNOWN = CacheValue(CacheState.UNKNOWN)
MISS = CacheValue(CacheState.MISS)


@dataclass
class ResolutionCache:
    """
    Memo of previous lookups distinguishing "never asked" from "asked, nothing found".

    Plain dict, not thread-safe; shard per worker if resolution is parallelized.
    """

    _values: Dict[tuple, CacheValue] = field(default_factory=dict)

    @staticmethod
    def key(query: str, kinds: Optional[FrozenSet[IdentityKind]], stages: Tuple[str, ...]) -> tuple:
        kind_key = tuple(sorted(k.value for k in kinds)) if kinds else ()
        return (normalize_token(query), kind_key, stages)

    def get(self, key: tuple) -> CacheValue:
        return self._values.get(key, UNKNOWN)

    def store_hit(self, key: tuple, owner: Nameable) -> None:
        self._values[key] = CacheValue(CacheState.HIT, owner)

    def store_miss(self, key: tuple) -> None:
        self._values[key] = MISS

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Resolution:
    owner: Optional[Nameable]
    stage: Optional[str] = None
    token: Optional[str] = None
    distance: Optional[int] = None
    ambiguous: bool = False
    cached: bool = False

    @property
    def resolved(self) -> bool:
        return self.owner is not None


_UNRESOLVED = Resolution(owner=None)


def _normalize_kinds(kind: KindFilter) -> Optional[FrozenSet[IdentityKind]]:
    if kind is None:
        return None
    if isinstance(kind, (IdentityKind, str)):
        return frozenset({IdentityKind(kind)})
    return frozenset(IdentityKind(k) for k in kind)


def fuzzy_threshold(query: str) -> int:
    return 1 if len(query) < 5 else len(query) // 3


def _usable(entry: Optional[IndexEntry], kinds) -> bool:
    return entry is not None and not entry.ambiguous and entry.matches_kind(kinds)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _stage_exact(query: str, index: NameIndex, kinds) -> Optional[Resolution]:
    entry = index.entries.get(query)
    if _usable(entry, kinds):
        return Resolution(entry.owner, STAGE_EXACT, entry.token, 0)
    return None


def _stage_stem(query: str, index: NameIndex, kinds) -> Optional[Resolution]:
    for token in index.tokens_for_stem(stem(query)):
        entry = index.entries.get(token)
        if _usable(entry, kinds):
            return Resolution(entry.owner, STAGE_STEM, token)
    return None


def _stage_alternation(query: str, index: NameIndex, kinds) -> Optional[Resolution]:
    for candidate in alternation_candidates(query):
        entry = index.entries.get(candidate)
        if _usable(entry, kinds):
            return Resolution(entry.owner, STAGE_ALTERNATION, candidate)
    return None


def _fuzzy_candidates(query: str, index: NameIndex, threshold: int, kinds) -> List[Tuple[int, str]]:
    """Tokens within ``threshold`` of ``query`` whose entry passes the kind filter."""
    if index.tree is not None:
        return [
            (d, token)
            for d, token in index.tree.search(query, threshold)
            if index.entries[token].matches_kind(kinds)
        ]

    # Linear fallback: length pre-filter, stop at the first clean near-exact hit.
    out: List[Tuple[int, str]] = []
    for token, entry in index.entries.items():
        if abs(len(token) - len(query)) > threshold:
            continue
        if not entry.matches_kind(kinds):
            continue
        d = levenshtein(query, token)
        if d <= threshold:
            out.append((d, token))
            if d <= 1 and not entry.ambiguous:
                break
    return out


def _stage_fuzzy(query: str, index: NameIndex, kinds) -> Optional[Resolution]:
    threshold = fuzzy_threshold(query)
    best: Optional[Tuple[int, bool, str, IndexEntry]] = None

    for d, token in _fuzzy_candidates(query, index, threshold, kinds):
        entry = index.entries[token]
        score = d + (AMBIGUITY_PENALTY if entry.ambiguous else 0)
        # equal scores prefer the unambiguous entry, then the token
        key = (score, entry.ambiguous, token)
        if best is None or key < best[:3]:
            best = (score, entry.ambiguous, token, entry)

    if best is None:
        return None

    score, _, token, entry = best
    if entry.ambiguous:
        log.debug("Fuzzy match for %r is ambiguous token %r; leaving unresolved", query, token)
        return Resolution(None, STAGE_FUZZY, token, score, ambiguous=True)
    return Resolution(entry.owner, STAGE_FUZZY, token, score)


_STAGE_FUNCS = {
    STAGE_EXACT: _stage_exact,
    STAGE_STEM: _stage_stem,
    STAGE_ALTERNATION: _stage_alternation,
    STAGE_FUZZY: _stage_fuzzy,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_detailed(
    query: str,
    index: NameIndex,
    kind: KindFilter = None,
    cache: Optional[ResolutionCache] = None,
    stages: Tuple[str, ...] = ALL_STAGES,
) -> Resolution:
    """Resolve ``query`` and report which stage produced the owner."""
    q = normalize_token(query)
    if not q:
        return _UNRESOLVED

    kinds = _normalize_kinds(kind)
    stages = tuple(stages)

    cache_key = None
    if cache is not None:
        cache_key = ResolutionCache.key(q, kinds, stages)
        cached = cache.get(cache_key)
        if cached.state is CacheState.HIT:
            return Resolution(cached.owner, cached=True)
        if cached.state is CacheState.MISS:
            return Resolution(None, cached=True)

    result = _UNRESOLVED
    for stage_name in stages:
        found = _STAGE_FUNCS[stage_name](q, index, kinds)
        if found is None:
            continue
        result = found
        if found.resolved:
            break

    if cache is not None:
        if result.resolved:
            cache.store_hit(cache_key, result.owner)
        else:
            cache.store_miss(cache_key)

    if result.resolved:
        log.debug("Resolved %r via %s (token=%r)", query, result.stage, result.token)
    else:
        log.debug("Could not resolve %r", query)
    return result


def resolve(
    query: str,
    index: NameIndex,
    kind: KindFilter = None,
    cache: Optional[ResolutionCache] = None,
    stages: Tuple[str, ...] = ALL_STAGES,
) -> Optional[Nameable]:
    """Return the identity ``query`` refers to, or None."""
    return resolve_detailed(query, index, kind=kind, cache=cache, stages=stages).owner


def require_resolved(
    query: str,
    index: NameIndex,
    kind: KindFilter = None,
    cache: Optional[ResolutionCache] = None,
    stages: Tuple[str, ...] = ALL_STAGES,
) -> Nameable:
    """Caller-side escalation: raise UnresolvedReferenceError instead of returning None."""
    owner = resolve(query, index, kind=kind, cache=cache, stages=stages)
    if owner is None:
        raise UnresolvedReferenceError(query, kind)
    return owner
