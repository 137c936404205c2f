"""
Tests for form field parsing.
"""

from datetime import date
from decimal import Decimal

import pytest

from khata.core.exceptions import InvalidFormValue
from khata.services.parsing import (
    clean_optional, parse_date, parse_decimal, parse_id, parse_int, parse_month, to_amount,
)


def test_parse_int():
    assert parse_int(" 12 ", "quantity") == 12
    assert parse_int("", "quantity", default=0) == 0
    assert parse_int(None, "quantity", default=None) is None


@pytest.mark.parametrize("value", ["", "abc", "1.5"])
def test_parse_int_rejects_bad_input(value):
    with pytest.raises(InvalidFormValue):
        parse_int(value, "quantity")


def test_parse_int_minimum():
    assert parse_int("1", "quantity", minimum=1) == 1
    with pytest.raises(InvalidFormValue):
        parse_int("0", "quantity", minimum=1)


def test_parse_decimal():
    assert parse_decimal("1000.50", "total") == Decimal("1000.50")
    assert parse_decimal("-20", "paid") == Decimal("-20")
    assert parse_decimal(" ", "paid", default=Decimal("0")) == Decimal("0")


@pytest.mark.parametrize("value", ["", "ten", "NaN", "Infinity"])
def test_parse_decimal_rejects_bad_input(value):
    with pytest.raises(InvalidFormValue):
        parse_decimal(value, "total")


def test_parse_date():
    assert parse_date("2026-03-01") == date(2026, 3, 1)
    for value in ("", "01/03/2026", "2026-13-01"):
        with pytest.raises(InvalidFormValue):
            parse_date(value)


def test_parse_month():
    assert parse_month("2026-02") == "2026-02"
    for value in (None, "2026-2", "2026-13", "2026-02-01"):
        with pytest.raises(InvalidFormValue):
            parse_month(value)


def test_parse_id():
    assert parse_id("7") == 7
    with pytest.raises(InvalidFormValue):
        parse_id("0")


def test_clean_optional():
    assert clean_optional("  0300 ") == "0300"
    assert clean_optional("   ") is None
    assert clean_optional(None) is None


def test_parse_decimal_rounds_to_cents():
    assert parse_decimal("0.005", "total") == Decimal("0.01")
    assert parse_decimal("0.004", "total") == Decimal("0.00")
    assert parse_decimal("-0.005", "paid") == Decimal("-0.01")
    assert parse_decimal("12.345", "gas_kg") == Decimal("12.35")


def test_parse_decimal_rejects_values_beyond_precision():
    with pytest.raises(InvalidFormValue):
        parse_decimal("1e40", "total")


def test_to_amount():
    assert to_amount(Decimal("1000")) == Decimal("1000.00")
    assert to_amount(Decimal("2.675")) == Decimal("2.68")
