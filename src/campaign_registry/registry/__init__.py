from __future__ import annotations

from .build_registry import (
    IdentityRegistry,
    SECTION_KINDS,
    build_identity,
    finalize_registry,
    link_characters,
    merge_identity,
    parse_registry_document,
    parse_registry_documents,
    parse_registry_files,
)
from .canonical import CanonicalNamer, assign_canonical_ids
from .entities import (
    NAMED_KINDS,
    HistoryEntry,
    Identity,
    IdentityKind,
    Nameable,
    current_value,
    current_values,
    sort_history,
)
from .tags import apply_tag, parse_tag_line
from .validity import ValidityRange, split_validity

__all__ = [
    "CanonicalNamer",
    "HistoryEntry",
    "Identity",
    "IdentityKind",
    "IdentityRegistry",
    "NAMED_KINDS",
    "Nameable",
    "SECTION_KINDS",
    "ValidityRange",
    "apply_tag",
    "assign_canonical_ids",
    "build_identity",
    "current_value",
    "current_values",
    "finalize_registry",
    "link_characters",
    "merge_identity",
    "parse_registry_document",
    "parse_registry_documents",
    "parse_registry_files",
    "parse_tag_line",
    "sort_history",
    "split_validity",
]
