# tests/test_tokenizer.py

from __future__ import annotations

import pytest

from campaign_registry import utils
from campaign_registry.core.exceptions import RegistrySyntaxError
from campaign_registry.loader import HEADING, ITEM, TEXT, tokenize_file, tokenize_line, tokenize_text


def test_heading_line() -> None:
    tok = tokenize_line("## Postavy", lineno=3)
    assert tok.kind == HEADING
    assert tok.depth == 2
    assert tok.text == "Postavy"
    assert tok.lineno == 3


def test_item_lines_carry_indentation_and_marker() -> None:
    top = tokenize_line("* Jan Novák")
    nested = tokenize_line("  - @location: Praha (2021:)")
    tabbed = tokenize_line("\t+ @status: active")

    assert (top.kind, top.depth, top.marker, top.text) == (ITEM, 0, "*", "Jan Novák")
    assert (nested.kind, nested.depth, nested.marker) == (ITEM, 2, "-")
    assert nested.text == "@location: Praha (2021:)"
    assert tabbed.depth == 4


def test_prose_and_emphasis_are_text() -> None:
    assert tokenize_line("The party splits up.").kind == TEXT
    assert tokenize_line("**bold** statement").kind == TEXT
    assert tokenize_line("#hashtag").kind == TEXT


def test_blank_line_is_rejected() -> None:
    with pytest.raises(RegistrySyntaxError):
        tokenize_line("   ")


def test_bom_is_stripped_on_first_line() -> None:
    tok = tokenize_line("\ufeff## Hráči", lineno=1)
    assert tok.kind == HEADING
    assert tok.text == "Hráči"


def test_tokenize_text_skips_blank_lines() -> None:
    tokens = list(tokenize_text("## NPC\n\n* Olga\n   \n"))
    assert [t.kind for t in tokens] == [HEADING, ITEM]
    assert [t.lineno for t in tokens] == [1, 3]


def test_tokenize_file(tmp_path) -> None:
    path = utils.tests_data_path("registry_base.md")
    tokens = list(tokenize_file(path))
    assert tokens[0].kind == HEADING
    assert any(t.kind == ITEM and t.text == "Jan Novák" for t in tokens)

    with pytest.raises(FileNotFoundError):
        list(tokenize_file(tmp_path / "missing.md"))
