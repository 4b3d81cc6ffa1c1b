# tests/test_validity.py

from __future__ import annotations

from datetime import date

from campaign_registry.registry.validity import (
    ALWAYS,
    parse_date_bound,
    parse_iso_date,
    split_validity,
)


def test_year_and_month_bounds_expand_to_period_edges() -> None:
    value, rng = split_validity("Praha (2021:2024-06)")
    assert value == "Praha"
    assert rng.valid_from == date(2021, 1, 1)
    assert rng.valid_to == date(2024, 6, 30)
    assert rng.malformed is None


def test_open_bounds() -> None:
    _, start_only = split_validity("Brno (2024-07:)")
    assert start_only.valid_from == date(2024, 7, 1)
    assert start_only.valid_to is None

    _, end_only = split_validity("Ostrava (:2020-02)")
    assert end_only.valid_from is None
    assert end_only.valid_to == date(2020, 2, 29)


def test_full_date_bounds() -> None:
    _, rng = split_validity("Inactive (2026-03-15:2026-04-01)")
    assert rng.valid_from == date(2026, 3, 15)
    assert rng.valid_to == date(2026, 4, 1)


def test_value_without_range_is_always_active() -> None:
    assert split_validity("Plzeň") == ("Plzeň", ALWAYS)
    assert ALWAYS.unbounded


def test_parentheses_without_colon_belong_to_the_value() -> None:
    value, rng = split_validity("Hrad (u řeky)")
    assert value == "Hrad (u řeky)"
    assert rng is ALWAYS


def test_malformed_bound_fails_open() -> None:
    """An unparsable bound drops the whole range; the value stays always active."""
    for raw in ["retired (2024-13:)", "retired (abc:2020)", "retired (2024-02-30:)"]:
        value, rng = split_validity(raw)
        assert value == "retired"
        assert rng.unbounded
        assert rng.malformed


def test_parse_date_bound_end_of_year() -> None:
    assert parse_date_bound("2020", is_end=True) == date(2020, 12, 31)
    assert parse_date_bound("2020") == date(2020, 1, 1)
    assert parse_date_bound("  ") is None


def test_parse_iso_date() -> None:
    assert parse_iso_date("2026-03-15") == date(2026, 3, 15)
    assert parse_iso_date("soon") is None
    assert parse_iso_date(None) is None
