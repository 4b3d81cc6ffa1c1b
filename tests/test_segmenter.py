# tests/test_segmenter.py

from __future__ import annotations

from campaign_registry import utils
from campaign_registry.loader import load_document, parse_document_text, segment_tokens, tokenize_text


def test_sections_hold_nested_items() -> None:
    text = """\
* preamble item
# Title
## NPC
Some prose between items.
* Olga
  - @location: Praha
    - deeper note
  - @status: alive
* Karel
"""
    sections = segment_tokens(list(tokenize_text(text)))
    assert [s.title for s in sections] == ["", "Title", "NPC"]
    assert sections[0].level == 0
    assert [i.text for i in sections[0].items] == ["preamble item"]
    assert sections[1].items == []

    npc = sections[2]
    assert [i.text for i in npc.items] == ["Olga", "Karel"]
    olga = npc.items[0]
    assert [c.text for c in olga.children] == ["@location: Praha", "@status: alive"]
    assert [c.text for c in olga.children[0].children] == ["deeper note"]
    assert [i.text for i in npc.iter_items()] == [
        "Olga",
        "@location: Praha",
        "deeper note",
        "@status: alive",
        "Karel",
    ]


def test_dedent_returns_to_outer_level() -> None:
    text = "## A\n* one\n    * two\n  * three\n* four\n"
    section = segment_tokens(list(tokenize_text(text)))[0]
    one, four = section.items
    assert [c.text for c in one.children] == ["two", "three"]
    assert four.text == "four"


def test_empty_input() -> None:
    assert segment_tokens([]) == []
    assert parse_document_text("").sections == []


def test_load_document_keeps_source() -> None:
    path = utils.tests_data_path("session_01.md")
    document = load_document(path)
    assert document.source == str(path)
    assert [s.title for s in document.find_sections("session 2026-03-15")] == ["Session 2026-03-15"]
    assert [i.text for i in document.iter_items()][:2] == ["Nováka", "@status: Inactive"]
