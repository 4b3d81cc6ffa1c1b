"""
Change events extracted from session logs.
"""

from .session_log import (
    ChangeEvent,
    TagChange,
    load_session_files,
    parse_session_document,
    session_date,
)

__all__ = [
    "ChangeEvent",
    "TagChange",
    "load_session_files",
    "parse_session_document",
    "session_date",
]
