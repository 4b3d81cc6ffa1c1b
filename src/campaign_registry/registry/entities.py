from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Set, runtime_checkable


# -----------------------------
# Kinds
# -----------------------------

class IdentityKind(str, Enum):
    PERSON = "person"
    CHARACTER = "character"
    NPC = "npc"
    FACTION = "faction"
    PLACE = "place"
    ITEM = "item"


# Kinds that take part in name resolution. Items are tracked but not indexed.
NAMED_KINDS = frozenset(
    {
        IdentityKind.PERSON,
        IdentityKind.CHARACTER,
        IdentityKind.NPC,
        IdentityKind.FACTION,
        IdentityKind.PLACE,
    }
)

# Stable ordering used wherever identities must be visited deterministically.
KIND_ORDER = {kind: i for i, kind in enumerate(IdentityKind)}


@runtime_checkable
class Nameable(Protocol):
    """Anything the name index can ingest."""

    kind: IdentityKind

    @property
    def names(self) -> Set[str]: ...


# -----------------------------
# Temporal history
# -----------------------------

@dataclass(slots=True)
class HistoryEntry:
    """
    One scoped value of an attribute.

    Both bounds are inclusive; a missing bound is open in that direction.
    """
    value: str
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    source: Optional[str] = None

    def covers(self, when: date) -> bool:
        if self.valid_from is not None and when < self.valid_from:
            return False
        if self.valid_to is not None and when > self.valid_to:
            return False
        return True


def history_sort_key(entry: HistoryEntry):
    """Absent ``valid_from`` compares as negative infinity."""
    if entry.valid_from is None:
        return (0, date.min)
    return (1, entry.valid_from)


def sort_history(history: List[HistoryEntry]) -> None:
    """Stable in-place sort: equal starts keep their insertion order."""
    history.sort(key=history_sort_key)


def current_value(history: Iterable[HistoryEntry], when: date) -> Optional[str]:
    """
    Scalar view: the covering entry with the latest ``valid_from`` wins.
    Among equal starts the entry appended last wins.
    """
    best: Optional[HistoryEntry] = None
    for entry in history:
        if not entry.covers(when):
            continue
        if best is None or history_sort_key(entry) >= history_sort_key(best):
            best = entry
    return best.value if best is not None else None


def current_values(history: Iterable[HistoryEntry], when: date) -> List[str]:
    """List view: every covering value, in history order, without duplicates."""
    out: List[str] = []
    for entry in history:
        if entry.covers(when) and entry.value not in out:
            out.append(entry.value)
    return out


# -----------------------------
# Identity
# -----------------------------

# Attribute histories with a dedicated slot on Identity.
SCALAR_ATTRIBUTES = ("location", "status", "owner", "quantity", "kind_override")
LIST_ATTRIBUTES = ("aliases", "groups", "access")


@dataclass(eq=False)
class Identity:
    """
    A named thing of the campaign world with its attribute histories.

    Equality is object identity: two declarations of the same name from
    different files are merged into one Identity by the registry, never
    compared field by field.
    """
    name: str
    kind: IdentityKind

    # Temporal attribute histories
    aliases: List[HistoryEntry] = field(default_factory=list)
    location: List[HistoryEntry] = field(default_factory=list)
    status: List[HistoryEntry] = field(default_factory=list)
    groups: List[HistoryEntry] = field(default_factory=list)
    owner: List[HistoryEntry] = field(default_factory=list)
    quantity: List[HistoryEntry] = field(default_factory=list)
    access: List[HistoryEntry] = field(default_factory=list)
    kind_override: List[HistoryEntry] = field(default_factory=list)
    tags: Dict[str, List[HistoryEntry]] = field(default_factory=dict)

    # Non-temporal
    contained_in: List[str] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)

    canonical_id: Optional[str] = None
    sources: List[str] = field(default_factory=list)

    # Derived (registry linking pass / refresh_current)
    characters: List["Identity"] = field(default_factory=list)
    current: Dict[str, Optional[str]] = field(default_factory=dict)
    current_lists: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def names(self) -> Set[str]:
        """Primary name, every alias ever recorded, and generic synonyms."""
        out = {self.name}
        out.update(e.value for e in self.aliases if e.value)
        out.update(s for s in self.synonyms if s)
        return out

    @property
    def flat_id(self) -> str:
        return f"{self.kind.value}/{self.name}"

    def histories(self) -> Dict[str, List[HistoryEntry]]:
        """Every attribute history, dedicated slots first, then generic tags."""
        out: Dict[str, List[HistoryEntry]] = {}
        for attr in LIST_ATTRIBUTES + SCALAR_ATTRIBUTES:
            out[attr] = getattr(self, attr)
        out.update(self.tags)
        return out

    def history(self, attr: str) -> List[HistoryEntry]:
        if attr in SCALAR_ATTRIBUTES or attr in LIST_ATTRIBUTES:
            return getattr(self, attr)
        return self.tags.setdefault(attr, [])

    def sort_histories(self) -> None:
        for history in self.histories().values():
            sort_history(history)

    def value_at(self, attr: str, when: date) -> Optional[str]:
        return current_value(self.histories().get(attr, []), when)

    def values_at(self, attr: str, when: date) -> List[str]:
        return current_values(self.histories().get(attr, []), when)

    def effective_kind(self, when: date) -> IdentityKind:
        """Declared kind unless a ``kind`` override covers ``when``."""
        override = current_value(self.kind_override, when)
        if override:
            try:
                return IdentityKind(override.strip().lower())
            except ValueError:
                return self.kind
        return self.kind

    def refresh_current(self, when: date) -> None:
        """Recompute the current scalar and list views at ``when``."""
        self.current = {attr: current_value(getattr(self, attr), when) for attr in SCALAR_ATTRIBUTES}
        for tag, history in self.tags.items():
            self.current[tag] = current_value(history, when)
        self.current_lists = {attr: current_values(getattr(self, attr), when) for attr in LIST_ATTRIBUTES}

    def __repr__(self) -> str:
        return f"<Identity {self.canonical_id or self.flat_id}>"


def is_character_of(character: Identity, person: Identity) -> bool:
    """True when ``character`` is one of ``person``'s characters."""
    if character.kind is not IdentityKind.CHARACTER or person.kind is not IdentityKind.PERSON:
        return False
    if any(c is character for c in person.characters):
        return True
    owner_names = {e.value.lower() for e in character.owner if e.value}
    return bool(owner_names & {n.lower() for n in person.names})
