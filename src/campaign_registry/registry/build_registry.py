"""
Identity registry parser.

Reads override documents shaped like::

    ## Characters
    * Jan Novák
      - @owner: Petr
      - @alias: Honza
      - @location: Praha (2021:2024-06)
      - @location: Brno (2024-07:)
      - @status: active

Each ``## Kind`` section holds identity declarations (top-level items); nested
``@tag: value`` items become attribute history entries. Several documents may
declare the same identity: their histories are concatenated, never replaced.
Documents are processed in the order given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from campaign_registry.config import get_config
from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.loader import Document, ItemNode, load_document
from campaign_registry.logging import get_logger
from campaign_registry.registry.canonical import assign_canonical_ids
from campaign_registry.registry.entities import (
    KIND_ORDER,
    LIST_ATTRIBUTES,
    NAMED_KINDS,
    SCALAR_ATTRIBUTES,
    Identity,
    IdentityKind,
)
from campaign_registry.registry.tags import apply_tag, canonical_tag, parse_tag_line, tag_aliases
from campaign_registry.registry.validity import split_validity

log = get_logger("build_registry")

# Section title (lowercase) -> kind. English and Czech spellings.
SECTION_KINDS: Dict[str, IdentityKind] = {
    "person": IdentityKind.PERSON,
    "persons": IdentityKind.PERSON,
    "people": IdentityKind.PERSON,
    "players": IdentityKind.PERSON,
    "hráči": IdentityKind.PERSON,
    "osoby": IdentityKind.PERSON,
    "character": IdentityKind.CHARACTER,
    "characters": IdentityKind.CHARACTER,
    "postavy": IdentityKind.CHARACTER,
    "npc": IdentityKind.NPC,
    "npcs": IdentityKind.NPC,
    "cp": IdentityKind.NPC,
    "faction": IdentityKind.FACTION,
    "factions": IdentityKind.FACTION,
    "frakce": IdentityKind.FACTION,
    "place": IdentityKind.PLACE,
    "places": IdentityKind.PLACE,
    "místa": IdentityKind.PLACE,
    "lokace": IdentityKind.PLACE,
    "item": IdentityKind.ITEM,
    "items": IdentityKind.ITEM,
    "předměty": IdentityKind.ITEM,
}


def section_kinds() -> Dict[str, IdentityKind]:
    """Built-in table extended by ``sections:`` in the YAML config."""
    out = dict(SECTION_KINDS)
    for title, kind in (get_config().sections or {}).items():
        try:
            out[str(title).strip().lower()] = IdentityKind(str(kind).strip().lower())
        except ValueError:
            log.warning("Ignoring config section %r: unknown kind %r", title, kind)
    return out


def kind_for_section(title: str, table: Optional[Dict[str, IdentityKind]] = None) -> Optional[IdentityKind]:
    table = table if table is not None else section_kinds()
    return table.get(title.strip().lower())


def _clean_name(text: str) -> str:
    return " ".join(text.strip().strip("*_").split())


# -----------------------------
# Registry
# -----------------------------

@dataclass
class IdentityRegistry:
    """
    In-memory identity store keyed by (kind, lowercase name).
    """
    identities: Dict[Tuple[IdentityKind, str], Identity] = field(default_factory=dict)

    @staticmethod
    def key(name: str, kind: IdentityKind) -> Tuple[IdentityKind, str]:
        return (kind, name.strip().lower())

    def register(self, identity: Identity) -> Identity:
        """Add ``identity`` or fold it into the one already stored under its key."""
        key = self.key(identity.name, identity.kind)
        existing = self.identities.get(key)
        if existing is None:
            self.identities[key] = identity
            return identity
        merge_identity(existing, identity)
        return existing

    def get(self, name: str, kind: Optional[IdentityKind] = None) -> Optional[Identity]:
        if kind is not None:
            return self.identities.get(self.key(name, kind))
        matches = self.find(name)
        return matches[0] if len(matches) == 1 else None

    def find(self, name: str) -> List[Identity]:
        n = name.strip().lower()
        return [i for (_, key_name), i in self.identities.items() if key_name == n]

    def of_kind(self, kind: IdentityKind) -> List[Identity]:
        return [i for (k, _), i in self.identities.items() if k is kind]

    def named_identities(self) -> List[Identity]:
        return [i for i in self.identities.values() if i.kind in NAMED_KINDS]

    def by_canonical_id(self, canonical_id: str) -> Optional[Identity]:
        for identity in self.identities.values():
            if identity.canonical_id == canonical_id:
                return identity
        return None

    def counts(self) -> Dict[str, int]:
        out = {kind.value: 0 for kind in IdentityKind}
        for kind, _ in self.identities:
            out[kind.value] += 1
        return out

    def in_order(self) -> List[Identity]:
        return sorted(self.identities.values(), key=lambda i: (KIND_ORDER[i.kind], i.name.lower()))

    def __iter__(self) -> Iterator[Identity]:
        return iter(list(self.identities.values()))

    def __len__(self) -> int:
        return len(self.identities)


def merge_identity(target: Identity, other: Identity) -> None:
    """Concatenate every history of ``other`` onto ``target``."""
    for attr in LIST_ATTRIBUTES + SCALAR_ATTRIBUTES:
        getattr(target, attr).extend(getattr(other, attr))
    for tag, history in other.tags.items():
        target.tags.setdefault(tag, []).extend(history)
    for name in other.contained_in:
        if name not in target.contained_in:
            target.contained_in.append(name)
    for name in other.synonyms:
        if name not in target.synonyms:
            target.synonyms.append(name)
    for src in other.sources:
        if src not in target.sources:
            target.sources.append(src)


# -----------------------------
# Document parsing
# -----------------------------

def build_identity(
    item: ItemNode,
    kind: IdentityKind,
    *,
    source: Optional[str] = None,
    diagnostics: Optional[Diagnostics] = None,
    aliases: Optional[Dict[str, str]] = None,
) -> Optional[Identity]:
    """Turn one declaration item and its nested tag lines into an Identity."""
    name = _clean_name(item.text)
    if not name:
        return None

    identity = Identity(name=name, kind=kind)
    if source:
        identity.sources.append(source)

    for child in item.children:
        parsed = parse_tag_line(child.text)
        if parsed is None:
            log.debug("Skipping non-tag line under %r (line %d): %r", name, child.lineno, child.text)
            continue
        tag, raw_value = parsed
        value, validity = split_validity(raw_value)
        if validity.malformed and diagnostics is not None:
            diagnostics.emit(
                DiagnosticKind.MALFORMED_VALIDITY_RANGE,
                f"{name} @{tag} line {child.lineno}: {validity.malformed}; treated as always active",
                subject=name,
                source=source,
                logger=log,
            )
        apply_tag(
            identity,
            canonical_tag(tag, aliases),
            value,
            validity.valid_from,
            validity.valid_to,
            source=source,
        )

    return identity


def parse_registry_document(
    document: Document,
    registry: Optional[IdentityRegistry] = None,
    *,
    diagnostics: Optional[Diagnostics] = None,
) -> IdentityRegistry:
    """Add every declaration of ``document`` to ``registry`` (created if absent)."""
    registry = registry if registry is not None else IdentityRegistry()
    kinds = section_kinds()
    aliases = tag_aliases()
    declared = 0

    for section in document.sections:
        kind = kind_for_section(section.title, kinds)
        if kind is None:
            if section.items:
                log.debug("Skipping section %r in %s: not an identity kind", section.title, document.source)
            continue
        for item in section.items:
            identity = build_identity(
                item,
                kind,
                source=document.source,
                diagnostics=diagnostics,
                aliases=aliases,
            )
            if identity is not None:
                registry.register(identity)
                declared += 1

    log.info("Parsed %s: declarations=%d", document.source or "<document>", declared)
    return registry


def link_characters(registry: IdentityRegistry) -> int:
    """
    Attach every character to the person(s) named in its ``owner`` history.

    Idempotent: clears derived links before rebuilding them.
    """
    for person in registry.of_kind(IdentityKind.PERSON):
        person.characters.clear()

    links = 0
    for character in registry.of_kind(IdentityKind.CHARACTER):
        seen = set()
        for entry in character.owner:
            key = entry.value.strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            person = registry.get(entry.value, IdentityKind.PERSON)
            if person is None:
                log.debug("Character %r names unknown player %r", character.name, entry.value)
                continue
            person.characters.append(character)
            links += 1
    return links


def finalize_registry(
    registry: IdentityRegistry,
    *,
    diagnostics: Optional[Diagnostics] = None,
    reference_date: Optional[date] = None,
) -> IdentityRegistry:
    """Sort histories, link characters, name places, compute current values."""
    when = reference_date or date.today()
    for identity in registry:
        identity.sort_histories()
    link_characters(registry)
    assign_canonical_ids(registry, diagnostics)
    for identity in registry:
        identity.refresh_current(when)
    return registry


def parse_registry_documents(
    documents: Iterable[Document],
    *,
    diagnostics: Optional[Diagnostics] = None,
    reference_date: Optional[date] = None,
) -> IdentityRegistry:
    registry = IdentityRegistry()
    for document in documents:
        parse_registry_document(document, registry, diagnostics=diagnostics)
    finalize_registry(registry, diagnostics=diagnostics, reference_date=reference_date)

    log.info("Identity registry built: %s", registry.counts())
    return registry


def parse_registry_files(
    paths: Iterable[Union[str, Path]],
    *,
    diagnostics: Optional[Diagnostics] = None,
    reference_date: Optional[date] = None,
) -> IdentityRegistry:
    """Load and parse override files in order."""
    documents = [load_document(p) for p in paths]
    return parse_registry_documents(documents, diagnostics=diagnostics, reference_date=reference_date)
