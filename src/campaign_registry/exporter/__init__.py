"""
Exporter package.

Re-exports the JSON export entry points used by the pipeline and CLI.
"""

from __future__ import annotations

from .json_exporter import (
    build_export_dict,
    export_identities_json,
    identity_to_dict,
    serialize_to_json_string,
)

__all__ = [
    "build_export_dict",
    "export_identities_json",
    "identity_to_dict",
    "serialize_to_json_string",
]
