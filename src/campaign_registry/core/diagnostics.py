"""
Recoverable, non-fatal findings raised while parsing, indexing and merging.

Nothing in the core raises for these: each is recorded here and logged as a
warning, and the operation continues with a local fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class DiagnosticKind(str, Enum):
    UNRESOLVED_REFERENCE = "unresolved_reference"
    AMBIGUOUS_REFERENCE = "ambiguous_reference"
    CYCLE_DETECTED = "cycle_detected"
    MALFORMED_VALIDITY_RANGE = "malformed_validity_range"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    subject: Optional[str] = None
    source: Optional[str] = None


@dataclass
class Diagnostics:
    """Ordered collector; optionally mirrors every entry to a logger."""

    logger: Optional[logging.Logger] = None
    items: List[Diagnostic] = field(default_factory=list)

    def emit(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        subject: Optional[str] = None,
        source: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> Diagnostic:
        diag = Diagnostic(kind=kind, message=message, subject=subject, source=source)
        self.items.append(diag)

        log = logger or self.logger
        if log is not None:
            where = f" [{source}]" if source else ""
            log.warning("%s: %s%s", kind.value, message, where)
        return diag

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.items if d.kind is kind]

    def counts(self) -> dict:
        out = {k.value: 0 for k in DiagnosticKind}
        for d in self.items:
            out[d.kind.value] += 1
        return out

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
