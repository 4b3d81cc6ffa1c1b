from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional, Tuple

from campaign_registry.config import get_config
from campaign_registry.registry.entities import HistoryEntry, Identity

# Canonical tag -> Identity attribute holding its history.
TAG_ROUTES: Dict[str, str] = {
    "alias": "aliases",
    "location": "location",
    "status": "status",
    "group": "groups",
    "faction": "groups",
    "owner": "owner",
    "player": "owner",
    "quantity": "quantity",
    "access": "access",
    "kind": "kind_override",
}

# Appended as plain values, never scoped.
NON_TEMPORAL_ROUTES: Dict[str, str] = {
    "in": "contained_in",
    "parent": "contained_in",
    "synonym": "synonyms",
}

_TAG_LINE_RE = re.compile(r"^@(?P<tag>[\w\-]+)\s*:\s*(?P<value>.*)$", re.UNICODE)


def tag_aliases() -> Dict[str, str]:
    """Extra spellings from ``tags:`` in the YAML config."""
    cfg = get_config()
    return {str(k).lower(): str(v).lower() for k, v in (cfg.tags or {}).items()}


def canonical_tag(tag: str, aliases: Optional[Dict[str, str]] = None) -> str:
    t = tag.strip().lower()
    if aliases is None:
        aliases = tag_aliases()
    return aliases.get(t, t)


def parse_tag_line(text: str) -> Optional[Tuple[str, str]]:
    """``"@location: Praha (2021:)"`` -> ``("location", "Praha (2021:)")``"""
    m = _TAG_LINE_RE.match(text.strip())
    if not m:
        return None
    return m.group("tag"), m.group("value").strip()


def apply_tag(
    identity: Identity,
    tag: str,
    value: str,
    valid_from: Optional[date] = None,
    valid_to: Optional[date] = None,
    source: Optional[str] = None,
) -> str:
    """
    Route one tag value onto ``identity``. Returns the attribute it landed in.

    Unknown tags go to the generic ``identity.tags`` map under their own name.
    """
    plain = NON_TEMPORAL_ROUTES.get(tag)
    if plain is not None:
        bucket = getattr(identity, plain)
        if value and value not in bucket:
            bucket.append(value)
        return plain

    attr = TAG_ROUTES.get(tag, tag)
    identity.history(attr).append(
        HistoryEntry(value=value, valid_from=valid_from, valid_to=valid_to, source=source)
    )
    return attr
