# src/campaign_registry/loader/tree_builder.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .segmenter import ItemNode, SectionNode, segment_tokens
from .tokenizer import Token, tokenize_file, tokenize_text


@dataclass
class Document:
    """
    Structural view of one registry or session file.

    Attributes:
        sections: Sections in file order, each with its item forest.
        source: Path or label the document was read from (for diagnostics).
    """

    sections: List[SectionNode]
    source: Optional[str] = None

    def __len__(self) -> int:  # pragma: no cover - trivial wrapper
        return len(self.sections)

    def __iter__(self) -> Iterator[SectionNode]:  # pragma: no cover - simple
        return iter(self.sections)

    def iter_items(self) -> Iterator[ItemNode]:
        """Every item of every section, depth-first."""
        for section in self.sections:
            yield from section.iter_items()

    def find_sections(self, title: str) -> List[SectionNode]:
        """Sections whose title matches ``title`` case-insensitively."""
        t = title.strip().lower()
        return [s for s in self.sections if s.title.lower() == t]

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"<Document {self.source!r} sections={len(self.sections)}>"


def build_document(tokens: Iterable[Token], source: Optional[str] = None) -> Document:
    """
    tokens -> Document(sections=[SectionNode, ...])
    """
    return Document(sections=segment_tokens(list(tokens)), source=source)


def parse_document_text(text: str, source: Optional[str] = None) -> Document:
    return build_document(tokenize_text(text), source=source)


def load_document(path: Union[str, Path]) -> Document:
    return build_document(tokenize_file(path), source=str(path))
