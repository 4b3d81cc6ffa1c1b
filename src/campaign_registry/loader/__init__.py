# src/campaign_registry/loader/__init__.py

"""
Public interface for the document loader stack.

    from campaign_registry.loader import (
        Token,
        ItemNode,
        SectionNode,
        Document,
        tokenize_file,
        tokenize_line,
        tokenize_text,
        segment_tokens,
        build_document,
        load_document,
        parse_document_text,
    )
"""

from __future__ import annotations

from .segmenter import ItemNode, SectionNode, segment_tokens
from .tokenizer import HEADING, ITEM, TEXT, Token, tokenize_file, tokenize_line, tokenize_text
from .tree_builder import Document, build_document, load_document, parse_document_text

__all__ = [
    "HEADING",
    "ITEM",
    "TEXT",
    "Token",
    "ItemNode",
    "SectionNode",
    "Document",
    "tokenize_file",
    "tokenize_line",
    "tokenize_text",
    "segment_tokens",
    "build_document",
    "load_document",
    "parse_document_text",
]
