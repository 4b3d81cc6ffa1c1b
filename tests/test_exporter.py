# tests/test_exporter.py

from __future__ import annotations

import json
from datetime import date

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.exporter import build_export_dict, export_identities_json, identity_to_dict
from campaign_registry.registry import IdentityKind, parse_registry_files


def _registry(path):
    return parse_registry_files([path], reference_date=date(2026, 1, 1))


def test_identity_to_dict_shape(base_registry_path) -> None:
    registry = _registry(base_registry_path)
    jan = identity_to_dict(registry.get("Jan Novák", IdentityKind.CHARACTER))

    assert jan["canonical_id"] == "character/Jan Novák"
    assert jan["kind"] == "character"
    assert jan["names"] == ["Honza", "Jan Novák"]
    assert jan["current"]["location"] == "Brno"
    assert jan["current_lists"]["groups"] == ["Rudá ruka"]
    assert jan["histories"]["location"][0] == {
        "value": "Praha",
        "valid_from": "2021-01-01",
        "valid_to": "2024-06-30",
        "source": str(base_registry_path),
    }
    # empty histories are omitted
    assert "quantity" not in jan["histories"]


def test_player_links_are_canonical_ids(base_registry_path) -> None:
    registry = _registry(base_registry_path)
    petr = identity_to_dict(registry.get("Petr Svoboda", IdentityKind.PERSON))
    assert petr["characters"] == ["character/Jan Novák"]


def test_build_export_dict_counts_and_order(base_registry_path) -> None:
    registry = _registry(base_registry_path)
    data = build_export_dict(registry)
    assert data["counts"]["place"] == 4
    kinds = [i["kind"] for i in data["identities"]]
    assert kinds[0] == "person"
    assert kinds[-1] == "item"
    assert "diagnostics" not in data
    assert "metrics" not in data


def test_export_writes_json_file(tmp_path, base_registry_path) -> None:
    registry = _registry(base_registry_path)
    diagnostics = Diagnostics()
    diagnostics.emit(DiagnosticKind.UNRESOLVED_REFERENCE, "'Nikdo' matches no identity", subject="Nikdo")

    out = export_identities_json(
        registry.in_order(),
        tmp_path / "out" / "registry.json",
        diagnostics=diagnostics,
        metrics={"events_applied": 0},
    )
    data = json.loads(out.read_text(encoding="utf-8"))

    assert len(data["identities"]) == len(registry)
    assert data["metrics"] == {"events_applied": 0}
    assert data["diagnostics"][0]["kind"] == "unresolved_reference"
    assert data["diagnostics"][0]["subject"] == "Nikdo"
    # non-ASCII names are written as-is
    assert "Vyšehrad" in out.read_text(encoding="utf-8")
