"""
Temporal state merger.

Folds dated change events from session logs into identity histories:

1. Drop events without tags or without a valid date; sort by date (stable).
2. Resolve each target: exact name map first, then the name resolver limited
   to exact / stem / alternation (never fuzzy). A player resolved where one
   of their characters was meant is remapped.
3. Append one history entry per tag. Unscoped values start at the event date
   and stay open-ended.
4. Re-sort every touched history and recompute current values.

Unresolved targets are reported and skipped; nothing here aborts the merge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.events.session_log import ChangeEvent
from campaign_registry.index.name_index import NameIndex, build_name_index, normalize_token, split_words
from campaign_registry.index.resolver import NON_FUZZY_STAGES, ResolutionCache, resolve
from campaign_registry.logging import get_logger
from campaign_registry.normalization.morphology import stem
from campaign_registry.registry.entities import Identity, IdentityKind
from campaign_registry.registry.tags import apply_tag

log = get_logger("state_merger")


@dataclass
class MergeResult:
    identities: List[Identity]
    touched: List[Identity] = field(default_factory=list)
    metrics: Dict[str, int] = field(default_factory=dict)


def _has_valid_date(event: ChangeEvent) -> bool:
    return isinstance(event.event_date, date) and not isinstance(event.event_date, datetime)


def build_name_map(identities: Iterable[Identity]) -> Dict[str, Optional[Identity]]:
    """
    Lowercase name -> identity over every resolvable name.

    A name claimed by two identities maps to None so it falls through to the
    resolver instead of picking one.
    """
    out: Dict[str, Optional[Identity]] = {}
    for identity in identities:
        for name in identity.names:
            key = normalize_token(name)
            if not key:
                continue
            if key in out and out[key] is not identity:
                out[key] = None
            else:
                out[key] = identity
    return out


def remap_to_character(person: Identity, target_name: str) -> Identity:
    """
    Pick the character of ``person`` that ``target_name`` names.

    Full names are tried first, then single words (and their stems).
    Returns ``person`` unchanged when no character matches.
    """
    if person.kind is not IdentityKind.PERSON or not person.characters:
        return person

    target = normalize_token(target_name)
    for character in person.characters:
        if target in {normalize_token(n) for n in character.names}:
            return character

    target_stem = stem(target)
    for character in person.characters:
        words = {w for n in character.names for w in split_words(n)}
        if target in words or target_stem in {stem(w) for w in words}:
            return character

    return person


def resolve_target(
    target_name: str,
    name_map: Dict[str, Optional[Identity]],
    index: NameIndex,
    cache: Optional[ResolutionCache] = None,
) -> Tuple[Optional[Identity], bool]:
    """Return ``(identity, remapped)``; ``identity`` is None when nothing matches."""
    found = name_map.get(normalize_token(target_name))
    if found is None:
        found = resolve(target_name, index, cache=cache, stages=NON_FUZZY_STAGES)
    if found is None:
        return None, False
    target = remap_to_character(found, target_name)
    return target, target is not found


def merge_state(
    identities: Iterable[Identity],
    events: Iterable[ChangeEvent],
    reference_date: Optional[date] = None,
    *,
    index: Optional[NameIndex] = None,
    diagnostics: Optional[Diagnostics] = None,
    cache: Optional[ResolutionCache] = None,
) -> MergeResult:
    """
    Apply ``events`` to ``identities`` in place and return them enriched.

    ``index`` defaults to a fresh index over ``identities``; pass the run's
    index to avoid rebuilding it.
    """
    identity_list = list(identities)
    when = reference_date or date.today()
    if index is None:
        index = build_name_index(identity_list)
    if cache is None:
        cache = ResolutionCache()

    metrics: Dict[str, int] = {
        "events_seen": 0,
        "events_skipped_invalid": 0,
        "events_applied": 0,
        "events_unresolved": 0,
        "events_remapped": 0,
        "tags_applied": 0,
        "identities_touched": 0,
    }

    all_events = list(events)
    metrics["events_seen"] = len(all_events)
    valid = [e for e in all_events if e.tags and _has_valid_date(e)]
    metrics["events_skipped_invalid"] = len(all_events) - len(valid)
    valid.sort(key=lambda e: e.event_date)

    name_map = build_name_map(identity_list)
    touched: Dict[int, Identity] = {}

    for event in valid:
        target, remapped = resolve_target(event.target_name, name_map, index, cache)
        if target is None:
            metrics["events_unresolved"] += 1
            entry = index.lookup(event.target_name)
            kind = DiagnosticKind.AMBIGUOUS_REFERENCE if entry is not None and entry.ambiguous else DiagnosticKind.UNRESOLVED_REFERENCE
            message = f"{event.target_name!r} ({event.event_date.isoformat()}) matches no identity; event skipped"
            if diagnostics is not None:
                diagnostics.emit(kind, message, subject=event.target_name, source=event.source, logger=log)
            else:
                log.warning("%s: %s", kind.value, message)
            continue

        if remapped:
            metrics["events_remapped"] += 1

        for change in event.tags:
            valid_from, valid_to = change.valid_from, change.valid_to
            if valid_from is None and valid_to is None:
                valid_from = event.event_date
            apply_tag(target, change.tag, change.value, valid_from, valid_to, source=event.source)
            metrics["tags_applied"] += 1

        touched[id(target)] = target
        metrics["events_applied"] += 1

    for identity in touched.values():
        identity.sort_histories()
        identity.refresh_current(when)

    metrics["identities_touched"] = len(touched)
    log.info(
        "State merge complete: events_seen=%d applied=%d skipped_invalid=%d unresolved=%d "
        "remapped=%d tags_applied=%d touched=%d",
        metrics["events_seen"],
        metrics["events_applied"],
        metrics["events_skipped_invalid"],
        metrics["events_unresolved"],
        metrics["events_remapped"],
        metrics["tags_applied"],
        metrics["identities_touched"],
    )
    return MergeResult(identities=identity_list, touched=list(touched.values()), metrics=metrics)
