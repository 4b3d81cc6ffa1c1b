"""
Canonical identifiers.

Places get a hierarchical path built by walking ``contained_in`` upward:

    place/Česko/Praha/Vyšehrad

Every other kind gets the flat ``kind/name`` form. A containment cycle is
reported once per cycle and every place on it falls back to its flat id; places
hanging below a cycle extend that flat id as usual.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from campaign_registry.core.diagnostics import DiagnosticKind, Diagnostics
from campaign_registry.logging import get_logger
from campaign_registry.registry.entities import Identity, IdentityKind

if TYPE_CHECKING:
    from campaign_registry.registry.build_registry import IdentityRegistry

log = get_logger("canonical")

SEPARATOR = "/"


def _parent_name(place: Identity) -> Optional[str]:
    for name in place.contained_in:
        if name and name.strip():
            return name.strip()
    return None


class CanonicalNamer:
    """
    Memoizing canonical-id resolver bound to one registry.

    ``memo`` is keyed by ``id(identity)`` so each identity is computed once.
    """

    def __init__(self, registry: "IdentityRegistry", diagnostics: Optional[Diagnostics] = None):
        self.registry = registry
        self.diagnostics = diagnostics
        self.memo: Dict[int, str] = {}

    def canonical_id(self, identity: Identity) -> str:
        cached = self.memo.get(id(identity))
        if cached is not None:
            return cached
        if identity.kind is not IdentityKind.PLACE:
            self.memo[id(identity)] = identity.flat_id
            return identity.flat_id
        return self._place_path(identity)

    def _place_path(self, start: Identity) -> str:
        # Walk upward until a root, an already-named place, or a repeat.
        chain: List[Identity] = []
        on_chain: Dict[int, int] = {}
        node: Optional[Identity] = start
        base: Optional[str] = None

        while node is not None:
            known = self.memo.get(id(node))
            if known is not None:
                base = known
                break

            if id(node) in on_chain:
                cycle = chain[on_chain[id(node)]:]
                self._report_cycle(cycle)
                for member in cycle:
                    self.memo[id(member)] = member.flat_id
                chain = chain[: on_chain[id(node)]]
                base = node.flat_id
                break

            on_chain[id(node)] = len(chain)
            chain.append(node)

            parent_name = _parent_name(node)
            if parent_name is None:
                break
            parent = self.registry.get(parent_name, IdentityKind.PLACE)
            if parent is None:
                # Undeclared container: still part of the path, but a root.
                base = f"{IdentityKind.PLACE.value}{SEPARATOR}{parent_name}"
                break
            node = parent

        # Assign from the top of the chain downward.
        for member in reversed(chain):
            if base is None:
                path = member.flat_id
            else:
                path = f"{base}{SEPARATOR}{member.name}"
            self.memo[id(member)] = path
            base = path

        return self.memo[id(start)]

    def _report_cycle(self, cycle: List[Identity]) -> None:
        names = " -> ".join(m.name for m in cycle) + f" -> {cycle[0].name}"
        message = f"containment cycle {names}; using flat identifiers"
        if self.diagnostics is not None:
            self.diagnostics.emit(
                DiagnosticKind.CYCLE_DETECTED,
                message,
                subject=cycle[0].name,
                logger=log,
            )
        else:
            log.warning("%s: %s", DiagnosticKind.CYCLE_DETECTED.value, message)


def assign_canonical_ids(registry: "IdentityRegistry", diagnostics: Optional[Diagnostics] = None) -> Dict[str, int]:
    """Set ``canonical_id`` on every identity of ``registry``."""
    namer = CanonicalNamer(registry, diagnostics)
    metrics = {"identities": 0, "hierarchical": 0, "flat": 0}
    for identity in registry:
        identity.canonical_id = namer.canonical_id(identity)
        metrics["identities"] += 1
        if identity.canonical_id == identity.flat_id:
            metrics["flat"] += 1
        else:
            metrics["hierarchical"] += 1
    return metrics
