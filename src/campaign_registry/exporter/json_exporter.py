"""
json_exporter.py
Structured JSON exporter for identity registries.

This exporter:
- Converts identities and their histories to dictionaries (NOT strings)
- Replaces object links (player -> characters) with canonical ids
- Is deterministic: identities are emitted in (kind, name) order
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from campaign_registry.logging import get_logger
from campaign_registry.registry.entities import KIND_ORDER, HistoryEntry, Identity

log = get_logger("json_exporter")


def _date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def history_to_list(history: Iterable[HistoryEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "value": e.value,
            "valid_from": _date(e.valid_from),
            "valid_to": _date(e.valid_to),
            "source": e.source,
        }
        for e in history
    ]


def identity_to_dict(identity: Identity) -> Dict[str, Any]:
    histories = {
        attr: history_to_list(history)
        for attr, history in identity.histories().items()
        if history
    }
    return {
        "canonical_id": identity.canonical_id or identity.flat_id,
        "name": identity.name,
        "kind": identity.kind.value,
        "names": sorted(identity.names),
        "contained_in": list(identity.contained_in),
        "synonyms": list(identity.synonyms),
        "characters": [c.canonical_id or c.flat_id for c in identity.characters],
        "sources": list(identity.sources),
        "current": dict(identity.current),
        "current_lists": {k: list(v) for k, v in identity.current_lists.items()},
        "histories": histories,
    }


def build_export_dict(
    identities: Iterable[Identity],
    *,
    diagnostics: Optional[Iterable[Any]] = None,
    metrics: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    ordered = sorted(identities, key=lambda i: (KIND_ORDER[i.kind], i.name.lower()))
    counts: Dict[str, int] = {}
    for identity in ordered:
        counts[identity.kind.value] = counts.get(identity.kind.value, 0) + 1

    out: Dict[str, Any] = {
        "counts": counts,
        "identities": [identity_to_dict(i) for i in ordered],
    }
    if metrics:
        out["metrics"] = dict(metrics)
    if diagnostics is not None:
        out["diagnostics"] = [
            {"kind": d.kind.value, "message": d.message, "subject": d.subject, "source": d.source}
            for d in diagnostics
        ]
    return out


def serialize_to_json_string(data: Dict[str, Any], *, pretty: bool = True) -> str:
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def export_identities_json(
    identities: Iterable[Identity],
    output_path: str | Path,
    *,
    pretty: bool = True,
    diagnostics: Optional[Iterable[Any]] = None,
    metrics: Optional[Dict[str, Any]] = None,
) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = build_export_dict(identities, diagnostics=diagnostics, metrics=metrics)
    log.info("Exporting identities JSON to: %s (%s)", output_path, data["counts"])

    with output_path.open("w", encoding="utf-8") as f:
        f.write(serialize_to_json_string(data, pretty=pretty))

    log.info("JSON export complete. size=%d bytes", output_path.stat().st_size)
    return output_path
