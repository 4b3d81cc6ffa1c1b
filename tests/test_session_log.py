# tests/test_session_log.py

from __future__ import annotations

from datetime import date

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.events import load_session_files, parse_session_document, session_date
from campaign_registry.loader import load_document, parse_document_text


def test_session_date_from_heading() -> None:
    assert session_date("Session 2026-03-15") == date(2026, 3, 15)
    assert session_date("Sezení 12 (2025-11-02, Brno)") == date(2025, 11, 2)
    assert session_date("Poznámky") is None
    assert session_date("Session 2026-13-40") is None


def test_parse_session_file(session_paths) -> None:
    events = parse_session_document(load_document(session_paths[0]))
    assert [e.target_name for e in events] == ["Nováka", "Neznámý Poutník", "Olga"]
    assert [e.event_date for e in events] == [date(2026, 3, 15), date(2026, 3, 15), None]

    novaka = events[0]
    assert [(t.tag, t.value) for t in novaka.tags] == [("status", "Inactive")]
    assert novaka.source == str(session_paths[0])
    assert novaka.lineno == 5


def test_tag_aliases_and_scoped_values() -> None:
    text = """\
# Session 2026-03-15
* Olga
  - @Loc: Brno (2026-03:2026-06)
  - not a tag
"""
    events = parse_session_document(parse_document_text(text), aliases={"loc": "location"})
    (change,) = events[0].tags
    assert change.tag == "location"
    assert change.value == "Brno"
    assert change.valid_from == date(2026, 3, 1)
    assert change.valid_to == date(2026, 6, 30)


def test_malformed_range_in_session_is_reported() -> None:
    text = "# Session 2026-03-15\n* Olga\n  - @status: dead (2026-99:)\n"
    diagnostics = Diagnostics()
    events = parse_session_document(parse_document_text(text, source="s.md"), diagnostics=diagnostics)
    (change,) = events[0].tags
    assert change.value == "dead"
    assert change.valid_from is None and change.valid_to is None
    assert len(diagnostics.of_kind(DiagnosticKind.MALFORMED_VALIDITY_RANGE)) == 1


def test_load_session_files_concatenates(session_paths) -> None:
    events = load_session_files(session_paths)
    assert [e.target_name for e in events] == ["Nováka", "Neznámý Poutník", "Olga", "Petr Svoboda"]
    assert events[-1].event_date == date(2026, 4, 2)
