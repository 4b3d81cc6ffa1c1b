# tests/test_canonical.py

from __future__ import annotations

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.loader import parse_document_text
from campaign_registry.registry import (
    IdentityKind,
    assign_canonical_ids,
    parse_registry_documents,
    parse_registry_files,
)


def _build(text: str, diagnostics: Diagnostics | None = None):
    return parse_registry_documents([parse_document_text(text, source="places.md")], diagnostics=diagnostics)


def test_hierarchical_place_paths(base_registry_path) -> None:
    registry = parse_registry_files([base_registry_path])
    assert registry.get("Česko", IdentityKind.PLACE).canonical_id == "place/Česko"
    assert registry.get("Praha", IdentityKind.PLACE).canonical_id == "place/Česko/Praha"
    assert registry.get("Vyšehrad", IdentityKind.PLACE).canonical_id == "place/Česko/Praha/Vyšehrad"
    assert registry.get("Jan Novák", IdentityKind.CHARACTER).canonical_id == "character/Jan Novák"
    assert registry.get("Rudá ruka", IdentityKind.FACTION).canonical_id == "faction/Rudá ruka"


def test_undeclared_container_becomes_root() -> None:
    registry = _build("""\
## Places
* Hrad
  - @in: Karlštejn
""")
    assert registry.get("Hrad", IdentityKind.PLACE).canonical_id == "place/Karlštejn/Hrad"


def test_cycle_falls_back_to_flat_ids_with_one_warning() -> None:
    """A contains B, B contains A: resolution terminates, both go flat, one diagnostic."""
    diagnostics = Diagnostics()
    registry = _build(
        """\
## Places
* A
  - @in: B
* B
  - @in: A
* C
  - @in: A
""",
        diagnostics,
    )
    assert registry.get("A", IdentityKind.PLACE).canonical_id == "place/A"
    assert registry.get("B", IdentityKind.PLACE).canonical_id == "place/B"
    assert registry.get("C", IdentityKind.PLACE).canonical_id == "place/A/C"
    assert len(diagnostics.of_kind(DiagnosticKind.CYCLE_DETECTED)) == 1


def test_self_containment_is_a_cycle() -> None:
    diagnostics = Diagnostics()
    registry = _build("## Places\n* Loop\n  - @in: Loop\n", diagnostics)
    assert registry.get("Loop", IdentityKind.PLACE).canonical_id == "place/Loop"
    assert len(diagnostics) == 1


def test_assign_metrics(base_registry_path) -> None:
    registry = parse_registry_files([base_registry_path])
    metrics = assign_canonical_ids(registry)
    assert metrics["identities"] == len(registry)
    # Praha, Vyšehrad, Brno hang below Česko
    assert metrics["hierarchical"] == 3
    assert metrics["flat"] == len(registry) - 3
