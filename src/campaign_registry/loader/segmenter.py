# src/campaign_registry/loader/segmenter.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .tokenizer import HEADING, ITEM, Token


@dataclass
class ItemNode:
    """
    A list item with its nested sub-items.

    Attributes:
        text: Trimmed item text without the bullet.
        marker: The bullet character used.
        indent: Indentation column of the bullet.
        lineno: Line number in original file (for diagnostics).
        children: Nested items ordered as they appeared.
    """

    text: str
    marker: str = "*"
    indent: int = 0
    lineno: int = 0
    children: List["ItemNode"] = field(default_factory=list)

    def add_child(self, child: "ItemNode") -> None:
        self.children.append(child)

    def iter_subtree(self) -> Iterator["ItemNode"]:
        """Yield this item and all descendants in depth-first order."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    def __repr__(self) -> str:
        return f"<ItemNode {self.marker} {self.text!r} children={len(self.children)}>"


@dataclass
class SectionNode:
    """
    A heading and the top-level items that follow it.

    Items that appear before the first heading land in a preamble section
    with ``level == 0`` and an empty title.
    """

    title: str
    level: int = 0
    lineno: int = 0
    items: List[ItemNode] = field(default_factory=list)

    def iter_items(self) -> Iterator[ItemNode]:
        for item in self.items:
            yield from item.iter_subtree()

    def __repr__(self) -> str:
        return f"<SectionNode h{self.level} {self.title!r} items={len(self.items)}>"


def segment_tokens(tokens: List[Token]) -> List[SectionNode]:
    """
    Convert a flat list of Tokens into sections holding nested item forests.

    Rules:
        - Every heading opens a new section (regardless of its level).
        - An item is a child of the nearest previous item with a smaller
          indentation inside the same section; otherwise it is top-level.
        - Prose lines carry no structure and are dropped.
    """
    if not tokens:
        return []

    sections: List[SectionNode] = []
    current: Optional[SectionNode] = None
    stack: List[ItemNode] = []  # open items, increasing indentation

    for tok in tokens:
        if tok.kind == HEADING:
            current = SectionNode(title=tok.text, level=tok.depth, lineno=tok.lineno)
            sections.append(current)
            stack = []
            continue

        if tok.kind != ITEM:
            continue

        if current is None:
            current = SectionNode(title="", level=0, lineno=tok.lineno)
            sections.append(current)

        node = ItemNode(text=tok.text, marker=tok.marker or "*", indent=tok.depth, lineno=tok.lineno)

        while stack and stack[-1].indent >= node.indent:
            stack.pop()

        if stack:
            stack[-1].add_child(node)
        else:
            current.items.append(node)
        stack.append(node)

    return sections
