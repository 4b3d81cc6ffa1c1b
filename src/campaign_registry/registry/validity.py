# src/campaign_registry/registry/validity.py

"""
Trailing validity ranges on attribute values.

    "Praha (2021:2024-06)"   -> value "Praha", 2021-01-01 .. 2024-06-30
    "Brno (2024-07:)"        -> value "Brno",  2024-07-01 .. open
    "Ostrava (:2020-05-17)"  -> value "Ostrava", open .. 2020-05-17
    "Plzeň"                  -> value "Plzeň", always active

Start bounds expand to the first day of their period, end bounds to the last.
An unparsable bound makes the whole range fail open (always active); the
caller is told through ``ValidityRange.malformed``.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

_RANGE_RE = re.compile(r"^(?P<value>.*?)\s*\((?P<start>[^():]*):(?P<end>[^():]*)\)\s*$")
_BOUND_RE = re.compile(r"^(?P<year>\d{3,4})(?:-(?P<month>\d{1,2})(?:-(?P<day>\d{1,2}))?)?$")


@dataclass(frozen=True)
class ValidityRange:
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    malformed: Optional[str] = None

    @property
    def unbounded(self) -> bool:
        return self.valid_from is None and self.valid_to is None


ALWAYS = ValidityRange()


def _parse_bound(text: str, *, is_end: bool) -> Optional[date]:
    """
    Parse one bound at year / year-month / full-date granularity.

    Raises ValueError for anything else (including impossible dates).
    """
    m = _BOUND_RE.match(text)
    if not m:
        raise ValueError(f"unrecognised date bound {text!r}")

    year = int(m.group("year"))
    month = m.group("month")
    day = m.group("day")

    if month is None:
        return date(year, 12, 31) if is_end else date(year, 1, 1)

    mon = int(month)
    if day is None:
        if not 1 <= mon <= 12:
            raise ValueError(f"month out of range in {text!r}")
        last = calendar.monthrange(year, mon)[1]
        return date(year, mon, last) if is_end else date(year, mon, 1)

    return date(year, mon, int(day))


def parse_date_bound(text: Optional[str], *, is_end: bool = False) -> Optional[date]:
    """Public helper: empty text is an open bound."""
    if text is None or not text.strip():
        return None
    return _parse_bound(text.strip(), is_end=is_end)


def parse_range(start_text: str, end_text: str) -> ValidityRange:
    try:
        start = parse_date_bound(start_text, is_end=False)
        end = parse_date_bound(end_text, is_end=True)
    except ValueError as exc:
        return ValidityRange(malformed=str(exc))
    return ValidityRange(valid_from=start, valid_to=end)


def split_validity(raw: str) -> Tuple[str, ValidityRange]:
    """
    Split ``raw`` into its value and trailing validity range.

    Parentheses without a colon are part of the value.
    """
    text = (raw or "").strip()
    m = _RANGE_RE.match(text)
    if not m:
        return text, ALWAYS
    value = m.group("value").strip()
    return value, parse_range(m.group("start"), m.group("end"))


def parse_iso_date(text: Optional[str]) -> Optional[date]:
    """Full ISO date or None (used for session headings and CLI options)."""
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None
