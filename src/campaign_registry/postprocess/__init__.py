"""
Passes that run over a parsed identity registry.
"""

from __future__ import annotations

from .state_merger import MergeResult, build_name_map, merge_state, remap_to_character, resolve_target

__all__ = [
    "MergeResult",
    "build_name_map",
    "merge_state",
    "remap_to_character",
    "resolve_target",
]
