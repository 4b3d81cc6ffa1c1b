"""
Name index: token -> identity map, stem -> tokens map and a BK-tree.

Every full name and alias of a named identity is indexed at priority 1; each
word of a multi-word name is indexed at priority 2 with a pointer back to the
full name it came from.

Collision policy when ``token`` is already present:

1. same owner            -> keep the better (numerically lower) priority
2. better priority       -> incoming replaces existing
3. worse priority        -> incoming is dropped
4. equal priority, one side is a character and the other its player
                         -> the person entry wins (same logical identity)
5. equal priority, otherwise
                         -> entry becomes ambiguous and lists every owner

The index is an explicit value: build it once per run and pass it into every
resolver call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from campaign_registry.index.bktree import BKTree
from campaign_registry.logging import get_logger
from campaign_registry.normalization.morphology import stem
from campaign_registry.registry.entities import (
    KIND_ORDER,
    NAMED_KINDS,
    Identity,
    IdentityKind,
    Nameable,
    is_character_of,
)

log = get_logger("name_index")

PRIORITY_FULL_NAME = 1
PRIORITY_WORD = 2
DEFAULT_MIN_WORD_LENGTH = 3

_WORD_SPLIT_RE = re.compile(r"\s+")
_WORD_STRIP = "\"'“”„‚‘’.,;:!?()[]{}"


def normalize_token(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(str(text).split()).lower()


def split_words(name: str) -> List[str]:
    """Words of a name with surrounding punctuation removed."""
    words = []
    for raw in _WORD_SPLIT_RE.split(normalize_token(name)):
        word = raw.strip(_WORD_STRIP)
        if word:
            words.append(word)
    return words


@dataclass
class IndexEntry:
    token: str
    owner: Nameable
    owner_kind: IdentityKind
    priority: int
    source_name: Optional[str] = None
    ambiguous: bool = False
    owners: List[Nameable] = field(default_factory=list)

    def owned_by(self, candidate: Nameable) -> bool:
        if self.ambiguous:
            return any(o is candidate for o in self.owners)
        return self.owner is candidate

    def matches_kind(self, kinds) -> bool:
        if kinds is None:
            return True
        if self.ambiguous:
            return any(o.kind in kinds for o in self.owners)
        return self.owner_kind in kinds


def _defers_to(a: Nameable, b: Nameable) -> bool:
    """``a`` is a character of person ``b``."""
    return isinstance(a, Identity) and isinstance(b, Identity) and is_character_of(a, b)


def _collapse_owned(owners: List[Nameable]) -> List[Nameable]:
    """Drop characters whose player is also among ``owners``."""
    return [o for o in owners if not any(_defers_to(o, other) for other in owners if other is not o)]


@dataclass
class NameIndex:
    entries: Dict[str, IndexEntry] = field(default_factory=dict)
    stems: Dict[str, List[str]] = field(default_factory=dict)
    tree: Optional[BKTree] = None
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, token: str) -> bool:
        return normalize_token(token) in self.entries

    def lookup(self, token: str) -> Optional[IndexEntry]:
        return self.entries.get(normalize_token(token))

    def tokens_for_stem(self, stem_key: str) -> List[str]:
        return self.stems.get(stem_key, [])

    def ambiguous_entries(self) -> List[IndexEntry]:
        return [e for e in self.entries.values() if e.ambiguous]

    # ------------------------------------------------------------------ #
    # Insertion
    # ------------------------------------------------------------------ #

    def insert(
        self,
        token: str,
        owner: Nameable,
        priority: int,
        source_name: Optional[str] = None,
    ) -> IndexEntry:
        key = normalize_token(token)
        existing = self.entries.get(key)

        if existing is None:
            entry = IndexEntry(
                token=key,
                owner=owner,
                owner_kind=owner.kind,
                priority=priority,
                source_name=source_name,
            )
            self.entries[key] = entry
            self.stems.setdefault(stem(key), []).append(key)
            return entry

        # Rule 1: same owner keeps its best priority.
        if existing.owned_by(owner):
            if priority < existing.priority:
                self._replace(existing, owner, priority, source_name)
            return existing

        # Rules 2 and 3: strict priority order.
        if priority < existing.priority:
            self._replace(existing, owner, priority, source_name)
            return existing
        if priority > existing.priority:
            return existing

        # Rule 4: a character and its player are one logical identity.
        if not existing.ambiguous:
            if _defers_to(owner, existing.owner):
                return existing
            if _defers_to(existing.owner, owner):
                self._replace(existing, owner, priority, source_name)
                return existing

        # Rule 5: genuine tie.
        owners = list(existing.owners) if existing.ambiguous else [existing.owner]
        owners.append(owner)
        owners = _collapse_owned(owners)
        if len(owners) == 1:
            self._replace(existing, owners[0], priority, existing.source_name)
            return existing

        if not existing.ambiguous:
            log.debug("Token %r is ambiguous between %s", key, [getattr(o, "name", o) for o in owners])
        existing.ambiguous = True
        existing.owners = owners
        existing.owner = owners[0]
        existing.owner_kind = owners[0].kind
        return existing

    @staticmethod
    def _replace(entry: IndexEntry, owner: Nameable, priority: int, source_name: Optional[str]) -> None:
        entry.owner = owner
        entry.owner_kind = owner.kind
        entry.priority = priority
        entry.source_name = source_name
        entry.ambiguous = False
        entry.owners = []

    def add_identity(self, identity: Nameable) -> None:
        names = sorted(identity.names, key=normalize_token)
        for name in names:
            self.insert(name, identity, PRIORITY_FULL_NAME)
        for name in names:
            words = split_words(name)
            if len(words) < 2:
                continue
            for word in words:
                if len(word) >= self.min_word_length:
                    self.insert(word, identity, PRIORITY_WORD, source_name=name)

    def build_tree(self) -> Optional[BKTree]:
        self.tree = BKTree.build(self.entries.keys()) if self.entries else None
        return self.tree


def _deterministic_order(identities: Iterable[Nameable]) -> List[Nameable]:
    return sorted(
        identities,
        key=lambda i: (KIND_ORDER.get(i.kind, len(KIND_ORDER)), normalize_token(getattr(i, "name", ""))),
    )


def build_name_index(
    identities: Iterable[Nameable],
    *,
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
    deterministic: bool = True,
    kinds=NAMED_KINDS,
    use_tree: bool = True,
) -> NameIndex:
    """
    Index every identity whose kind is in ``kinds``.

    With ``deterministic`` the identities are visited in (kind, name) order so
    identical data always produces identical entries. Without ``use_tree`` the
    fuzzy stage falls back to a linear scan.
    """
    selected = [i for i in identities if kinds is None or i.kind in kinds]
    if deterministic:
        selected = _deterministic_order(selected)

    index = NameIndex(min_word_length=min_word_length)
    for identity in selected:
        index.add_identity(identity)

    if use_tree:
        index.build_tree()

    log.info(
        "Name index built: identities=%d tokens=%d stems=%d ambiguous=%d",
        len(selected),
        len(index.entries),
        len(index.stems),
        len(index.ambiguous_entries()),
    )
    return index
