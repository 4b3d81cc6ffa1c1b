# src/campaign_registry/loader/tokenizer.py

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from campaign_registry.core.exceptions import RegistrySyntaxError

HEADING = "heading"
ITEM = "item"
TEXT = "text"

TAB_WIDTH = 4

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_ITEM_RE = re.compile(r"^(\s*)([*+\-])\s+(.*)$")


@dataclass(frozen=True)
class Token:
    """
    A single structural line of a registry or session document.

    Attributes:
        lineno: 1-based line number in the original file.
        kind: HEADING, ITEM or TEXT.
        depth: Heading level (number of '#') for headings, indentation
            column for items and text.
        marker: The list bullet ('*', '-', '+') for items, else None.
        text: Trimmed payload (heading title, item text or prose).
        raw: The original line content without trailing newline characters.
    """
    lineno: int
    kind: str
    depth: int
    marker: Optional[str]
    text: str
    raw: str


def _strip_eol(line: str) -> str:
    """Strip trailing CR/LF characters but preserve all other whitespace."""
    return line.rstrip("\r\n")


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(TAB_WIDTH))


def tokenize_line(line: str, lineno: int = 0) -> Token:
    """
    Classify a single line.

    Examples:
        "## Characters"              -> HEADING depth=2 text="Characters"
        "* Jan Novák"                -> ITEM depth=0 marker='*'
        "  - @location: Praha"       -> ITEM depth=2 marker='-'
        "Anything else"              -> TEXT
    """
    raw = _strip_eol(line)

    if not raw.strip():
        raise RegistrySyntaxError(f"Empty or whitespace-only line at {lineno}")

    # Handle optional UTF-8 BOM on the very first line.
    if lineno == 1 and raw.startswith("\ufeff"):
        raw = raw.lstrip("\ufeff")

    m = _HEADING_RE.match(raw)
    if m:
        return Token(lineno=lineno, kind=HEADING, depth=len(m.group(1)), marker=None, text=m.group(2).strip(), raw=raw)

    m = _ITEM_RE.match(raw)
    if m:
        return Token(
            lineno=lineno,
            kind=ITEM,
            depth=_indent_width(m.group(1)),
            marker=m.group(2),
            text=m.group(3).strip(),
            raw=raw,
        )

    stripped = raw.lstrip()
    return Token(lineno=lineno, kind=TEXT, depth=_indent_width(raw[: len(raw) - len(stripped)]), marker=None, text=stripped.strip(), raw=raw)


def tokenize_text(text: str) -> Iterator[Token]:
    """Yield tokens for every non-blank line of ``text``."""
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        if not raw_line.strip():
            continue
        yield tokenize_line(raw_line, lineno=lineno)


def tokenize_file(path: Union[str, Path]) -> Iterator[Token]:
    """
    Yield Token objects for every non-blank line in the given file.

    Raises:
        FileNotFoundError: if `path` does not exist.
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise FileNotFoundError(f"Document not found: {file_path}")

    with file_path.open("r", encoding="utf-8", errors="replace") as f:
        for lineno, raw_line in enumerate(f, start=1):
            stripped = _strip_eol(raw_line)

            if not stripped.strip():
                continue

            yield tokenize_line(stripped, lineno=lineno)
