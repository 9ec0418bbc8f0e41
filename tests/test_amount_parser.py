"""Tests for amount parsing and rounding."""

from decimal import Decimal

import pytest

from woodshop.utils.amount_parser import money_round, parse_amount, quantity_round


@pytest.mark.parametrize(
    "value,expected",
    [
        ("123.45", Decimal("123.45")),
        ("R$ 1,234.56", Decimal("1234.56")),
        ("$99", Decimal("99")),
        ("(50.00)", Decimal("-50.00")),
        (85.5, Decimal("85.5")),
        (12, Decimal("12")),
        (Decimal("0.1"), Decimal("0.1")),
    ],
)
def test_parse_amount(value, expected):
    """Test parsing amounts in various formats."""
    assert parse_amount(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", "   ", "abc", "NaN", True, "Infinity", Decimal("NaN"), Decimal("-Infinity"), float("nan")],
)
def test_parse_amount_invalid(value):
    """Test that unparsable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(value)


def test_money_round_half_up():
    """Test rounding to cents with halves going up."""
    assert money_round(Decimal("600.005")) == Decimal("600.01")
    assert money_round(Decimal("316.666")) == Decimal("316.67")
    assert money_round(Decimal("10")) == Decimal("10.00")


def test_quantity_round_half_up():
    """Test rounding quantities to thousandths with halves going up."""
    assert quantity_round(Decimal("0.0005")) == Decimal("0.001")
    assert quantity_round(Decimal("0.0004")) == Decimal("0.000")
    assert quantity_round(Decimal("2")) == Decimal("2.000")
