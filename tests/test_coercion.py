"""Tests for the coercion helpers used at the decode boundary."""
import math

import pytest
from dateutil import parser as date_parser

from tradejournal.share.coercion import (
    is_asset_type,
    is_currency,
    is_direction,
    is_option_type,
    finite_sum,
    normalize_notes,
    round_count,
    round_money,
    to_date_only,
    to_number,
    utc_timestamp,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, 5.0),
        (-2.5, -2.5),
        ("3.5", 3.5),
        (" 42 ", 42.0),
        ("5.", 5.0),
        (".5", 0.5),
        ("-1e3", -1000.0),
        ("0x1F", 31.0),
        ("0b101", 5.0),
    ],
)
def test_to_number_accepts_numbers_and_numeric_strings(value, expected) -> None:
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        None, "abc", "", float("nan"), float("inf"), "-inf", True, [1], {"a": 1}, 10**400,
        "1_000", "nan", "Infinity", "1e400", ".", "0x", "12abc",
    ],
)
def test_to_number_falls_back_on_anything_non_finite(value) -> None:
    assert to_number(value) == 0.0
    assert to_number(value, 7.0) == 7.0
    assert to_number(value, None) is None


def test_round_money_rounds_half_up_on_the_written_value() -> None:
    assert round_money(1.005) == 1.01
    assert round_money(2.675) == 2.68
    assert round_money(-1.005) == -1.01
    assert round_money(200) == 200.0
    assert round_money(0.1 + 0.2) == 0.3


def test_round_money_never_returns_negative_zero() -> None:
    result = round_money(-0.001)
    assert result == 0.0
    assert math.copysign(1, result) == 1


def test_round_count_rounds_halves_up() -> None:
    assert round_count(2.5) == 3
    assert round_count(2.4) == 2
    assert round_count(-0.5) == 0
    assert round_count(7) == 7


def test_enum_guards() -> None:
    assert is_asset_type("STOCK") and is_asset_type("OPTION")
    assert not is_asset_type("stock")
    assert is_direction("LONG") and is_direction("SHORT")
    assert not is_direction(1)
    assert is_currency("USD") and is_currency("CAD")
    assert not is_currency("EUR")
    assert is_option_type("CALL") and is_option_type("PUT")
    assert not is_option_type(None)


def test_normalize_notes() -> None:
    assert normalize_notes("  breakout  ") == "breakout"
    assert normalize_notes("   ") is None
    assert normalize_notes("") is None
    assert normalize_notes(None) is None


def test_to_date_only() -> None:
    assert to_date_only("2024-02-10T15:30:00Z") == "2024-02-10"
    assert to_date_only("2024-02-10") == "2024-02-10"


def test_utc_timestamp_is_iso_with_z_suffix() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    parsed = date_parser.isoparse(stamp)
    assert parsed.utcoffset().total_seconds() == 0


def test_round_money_keeps_very_large_amounts() -> None:
    assert round_money(1e27) == 1e27
    assert round_money(-1.5e300) == -1.5e300
    assert round_money(1.7976931348623157e308) == 1.7976931348623157e308


def test_round_money_non_finite_is_zero() -> None:
    assert round_money(float("inf")) == 0.0
    assert round_money(float("nan")) == 0.0


def test_finite_sum() -> None:
    assert finite_sum([0.1] * 10) == 1.0
    assert finite_sum([]) == 0.0
    assert finite_sum([1e308, 1e308]) == 0.0
    assert finite_sum([1e308, 1e308], fallback=-1.0) == -1.0
    assert finite_sum([float("inf"), float("-inf")]) == 0.0
