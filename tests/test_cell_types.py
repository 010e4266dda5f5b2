"""
tests/test_cell_types.py

Pytest unit tests for the cell predicates and parsers.

Coverage
--------
- Whole number / decimal predicates with currency and accounting noise
- Blank and bare "-" handling on both the predicate and parser side
- Date formats in priority order, ISO date-times, spreadsheet serials
- Parser failures raising MalformedFieldError
- Idempotent numeric cleaning
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from app.domain.ingestion_errors import MalformedFieldError
from app.validators.cell_types import (
    clean_numeric,
    is_date,
    is_decimal,
    is_whole_number,
    parse_date,
    parse_decimal,
    parse_text,
    parse_whole_number,
    serial_to_date,
)


# ---------------------------------------------------------------------------
# Numeric predicates
# ---------------------------------------------------------------------------


class TestWholeNumber:
    @pytest.mark.parametrize("value", ["100", "-50", "$1,200", "(75)", " 42 ", "12.0"])
    def test_accepts_integral_values(self, value: str) -> None:
        assert is_whole_number(value) is True

    @pytest.mark.parametrize("value", ["12.5", "abc", "", "   ", "-", "$", None])
    def test_rejects_non_integral_or_empty(self, value: str | None) -> None:
        assert is_whole_number(value) is False


class TestDecimal:
    @pytest.mark.parametrize("value", ["1618.5", "$3,000.25", "-0.5", "7"])
    def test_accepts_numbers(self, value: str) -> None:
        assert is_decimal(value) is True

    @pytest.mark.parametrize("value", ["-", "", "NaN", "Infinity", "1_000", "twelve"])
    def test_rejects_non_numbers(self, value: str) -> None:
        assert is_decimal(value) is False


@pytest.mark.parametrize("value", ["1234.5", "-50", "0.001", "1618"])
def test_cleaning_clean_numeric_text_is_idempotent(value: str) -> None:
    assert clean_numeric(value) == value
    assert clean_numeric(clean_numeric(value)) == clean_numeric(value)


def test_cleaning_strips_currency_and_grouping() -> None:
    assert clean_numeric(" $1,234.50 ") == "1234.50"
    assert clean_numeric("(1,000)") == "1000"


# ---------------------------------------------------------------------------
# Date predicate and parser
# ---------------------------------------------------------------------------


class TestDates:
    def test_day_first_slash_format_wins(self) -> None:
        assert parse_date("2/1/2014") == dt.date(2014, 1, 2)

    def test_single_digit_day_and_month(self) -> None:
        assert parse_date("1/1/2014") == dt.date(2014, 1, 1)

    def test_falls_back_to_month_first_when_day_first_is_invalid(self) -> None:
        assert parse_date("12/31/2014") == dt.date(2014, 12, 31)

    def test_iso_date_and_date_time(self) -> None:
        assert parse_date("2014-06-01") == dt.date(2014, 6, 1)
        assert parse_date("2014-06-01T08:30:00") == dt.date(2014, 6, 1)
        assert parse_date("2014-06-01T08:30:00.250") == dt.date(2014, 6, 1)

    def test_other_separators(self) -> None:
        assert parse_date("2014/06/01") == dt.date(2014, 6, 1)
        assert parse_date("06-13-2014") == dt.date(2014, 6, 13)
        assert parse_date("13-06-2014") == dt.date(2014, 6, 13)

    def test_serial_44197_is_first_of_january_2021(self) -> None:
        assert parse_date("44197") == dt.date(2021, 1, 1)
        assert serial_to_date(44197) == dt.date(2021, 1, 1)

    def test_serial_day_one_and_fraction(self) -> None:
        assert serial_to_date(1) == dt.date(1900, 1, 1)
        assert parse_date("44197.75") == dt.date(2021, 1, 1)

    @pytest.mark.parametrize("value", ["0", "100000", "-5", "hello", "2014-13-01", ""])
    def test_is_date_rejects(self, value: str) -> None:
        assert is_date(value) is False

    @pytest.mark.parametrize("value", ["1", "99999", "2014-01-01", "01/02/2014"])
    def test_is_date_accepts(self, value: str) -> None:
        assert is_date(value) is True

    def test_unparseable_date_raises(self) -> None:
        with pytest.raises(MalformedFieldError):
            parse_date("next tuesday")

    def test_blank_date_is_none(self) -> None:
        assert parse_date("  ") is None


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


class TestParsers:
    def test_parse_text_trims_and_blanks_to_none(self) -> None:
        assert parse_text("  Canada ") == "Canada"
        assert parse_text("") is None
        assert parse_text(None) is None

    def test_parse_decimal_strips_noise(self) -> None:
        assert parse_decimal("$1,234.50") == Decimal("1234.50")

    @pytest.mark.parametrize("value", ["", "-", "  -  ", "$", None])
    def test_parse_decimal_empty_values_are_none(self, value: str | None) -> None:
        assert parse_decimal(value) is None

    def test_parse_decimal_rejects_garbage(self) -> None:
        with pytest.raises(MalformedFieldError) as exc_info:
            parse_decimal("n/a")
        assert exc_info.value.expected_type == "decimal"

    def test_parse_whole_number(self) -> None:
        assert parse_whole_number("7") == 7
        assert parse_whole_number("2,014") == 2014
        assert parse_whole_number("-") is None

    def test_parse_whole_number_rejects_fraction(self) -> None:
        with pytest.raises(MalformedFieldError):
            parse_whole_number("7.5")

    @pytest.mark.parametrize("value", ["1e999999999", "1E5", "2.5e-3"])
    def test_parse_whole_number_rejects_exponent_notation(self, value: str) -> None:
        with pytest.raises(MalformedFieldError):
            parse_whole_number(value)

    def test_exponent_notation_is_not_numeric(self) -> None:
        assert is_whole_number("1e999999999") is False
        assert is_decimal("1e999999999") is False
        with pytest.raises(MalformedFieldError):
            parse_decimal("1e999999999")
