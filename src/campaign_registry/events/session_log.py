"""
Session logs -> change events.

A heading that contains an ISO date opens a session; every identity item
under it becomes one ChangeEvent dated with that session::

    # Session 2026-03-15
    * Jan Novák
      - @status: Inactive
      - @location: Brno (2026-03:)

Headings without a date end the current session; items under them produce
undated events, which the merger discards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.loader import Document, load_document
from campaign_registry.logging import get_logger
from campaign_registry.registry.tags import canonical_tag, parse_tag_line, tag_aliases
from campaign_registry.registry.validity import parse_iso_date, split_validity

log = get_logger("session_log")

_ISO_DATE_RE = re.compile(r"(?<!\d)(\d{4}-\d{2}-\d{2})(?!\d)")


@dataclass(slots=True)
class TagChange:
    tag: str
    value: str
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None


@dataclass(slots=True)
class ChangeEvent:
    """
    One identity's recorded changes in one session.

    Consumed once, in date order, by ``merge_state``.
    """
    target_name: str
    event_date: Optional[date] = None
    tags: List[TagChange] = field(default_factory=list)
    source: Optional[str] = None
    lineno: int = 0


def session_date(title: str) -> Optional[date]:
    m = _ISO_DATE_RE.search(title)
    return parse_iso_date(m.group(1)) if m else None


def parse_session_document(
    document: Document,
    *,
    diagnostics: Optional[Diagnostics] = None,
    aliases: Optional[Dict[str, str]] = None,
) -> List[ChangeEvent]:
    events: List[ChangeEvent] = []
    aliases = aliases if aliases is not None else tag_aliases()

    for section in document.sections:
        when = session_date(section.title)
        for item in section.items:
            target = " ".join(item.text.strip().strip("*_").split())
            if not target:
                continue
            event = ChangeEvent(target_name=target, event_date=when, source=document.source, lineno=item.lineno)
            for child in item.children:
                parsed = parse_tag_line(child.text)
                if parsed is None:
                    continue
                tag, raw_value = parsed
                value, validity = split_validity(raw_value)
                if validity.malformed and diagnostics is not None:
                    diagnostics.emit(
                        DiagnosticKind.MALFORMED_VALIDITY_RANGE,
                        f"{target} @{tag} line {child.lineno}: {validity.malformed}; treated as unscoped",
                        subject=target,
                        source=document.source,
                        logger=log,
                    )
                event.tags.append(
                    TagChange(
                        tag=canonical_tag(tag, aliases),
                        value=value,
                        valid_from=validity.valid_from,
                        valid_to=validity.valid_to,
                    )
                )
            events.append(event)

    log.info("Parsed session log %s: events=%d", document.source or "<document>", len(events))
    return events


def load_session_files(
    paths: Iterable[Union[str, Path]],
    *,
    diagnostics: Optional[Diagnostics] = None,
) -> List[ChangeEvent]:
    events: List[ChangeEvent] = []
    for path in paths:
        events.extend(parse_session_document(load_document(path), diagnostics=diagnostics))
    return events
