"""Tests for amount parsing and numeric coercion."""

import pytest
from decimal import Decimal

from bizdocs.utils.amount_parser import coerce_number, parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("SAR 1,234.50", Decimal("1234.50")),
        ("1,234.56 usd", Decimal("1234.56")),
        ("-123.45", Decimal("-123.45")),
        ("(123.45)", Decimal("-123.45")),
        ("﷼ 10", Decimal("10")),
    ],
)
def test_parse_amount(text, expected):
    """Test parsing amount strings in various formats."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Test that unreadable and non-finite amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, Decimal("0")),
        (True, Decimal("0")),
        (5, Decimal("5")),
        (0.1, Decimal("0.1")),
        (float("nan"), Decimal("0")),
        (float("inf"), Decimal("0")),
        (Decimal("2.5"), Decimal("2.5")),
        (Decimal("NaN"), Decimal("0")),
        ("3", Decimal("3")),
        ("SAR 1,000", Decimal("1000")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
    ],
)
def test_coerce_number(value, expected):
    """Test that coercion never raises and falls back to zero."""
    assert coerce_number(value) == expected
