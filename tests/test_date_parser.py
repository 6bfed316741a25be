"""Tests for date parser with relative dates."""

import pytest
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from bizdocs.utils.date_parser import coerce_date, default_valid_until, parse_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_written_date():
    """Test parsing a written-out date."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    result = parse_date("Tomorrow ")
    assert result == date.today() + timedelta(days=1)


def test_parse_next_month():
    """Test parsing 'next month'."""
    expected = (date.today() + relativedelta(months=1)).replace(day=1)
    assert parse_date("next month") == expected


def test_parse_end_of_month():
    """Test parsing 'end of month'."""
    result = parse_date("end of month")
    assert result.month == date.today().month
    assert (result + timedelta(days=1)).day == 1


@pytest.mark.parametrize(
    "text,expected",
    [
        ("in 30 days", timedelta(days=30)),
        ("+2 weeks", timedelta(weeks=2)),
        ("+10d", timedelta(days=10)),
    ],
)
def test_parse_offsets(text, expected):
    """Test parsing offsets from today."""
    assert parse_date(text) == date.today() + expected


def test_parse_month_offset():
    """Test parsing '+1 month'."""
    assert parse_date("+1 month") == date.today() + relativedelta(months=1)


def test_parse_invalid_date():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


class TestCoerceDate:
    """Tests for lenient date conversion."""

    def test_date_and_datetime(self):
        assert coerce_date(date(2026, 1, 2)) == date(2026, 1, 2)
        assert coerce_date(datetime(2026, 1, 2, 15, 30)) == date(2026, 1, 2)

    def test_iso_strings(self):
        assert coerce_date("2026-01-02") == date(2026, 1, 2)
        assert coerce_date("2026-01-02T10:00:00.000Z") == date(2026, 1, 2)

    def test_relative_string(self):
        assert coerce_date("tomorrow") == date.today() + timedelta(days=1)

    @pytest.mark.parametrize("value", [None, "", "   ", "soon-ish"])
    def test_unparseable_is_none(self, value):
        assert coerce_date(value) is None


def test_default_valid_until():
    """Test 30-day default validity."""
    assert default_valid_until(date(2026, 1, 15)) == date(2026, 2, 14)
    assert default_valid_until(date(2026, 1, 15), days=7) == date(2026, 1, 22)
