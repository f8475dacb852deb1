from datetime import date, datetime
from decimal import Decimal

import pytest

from expense_core.exceptions import ValidationError
from expense_core.validators import (
    parse_amount,
    validate_date,
    validate_optional_str,
    validate_required_str,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("12.5", Decimal("12.50")), ("1,234.567", Decimal("1234.57")), (3, Decimal("3.00"))],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "0", "-5", "abc", "nan", "inf", True, "0.001", "0.004", "-0.001"])
def test_parse_amount_rejects(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_required_and_optional_strings():
    assert validate_required_str("  Food ", "category") == "Food"
    assert validate_optional_str("   ", "note") is None
    assert validate_optional_str(" hi ", "note") == "hi"
    assert validate_required_str("C" * 60, "category") == "C" * 60
    assert validate_optional_str("n" * 500, "note") == "n" * 500


def test_validate_date():
    assert validate_date("2024-06-01") == "2024-06-01"
    assert validate_date(date(2024, 6, 1)) == "2024-06-01"
    assert validate_date(datetime(2024, 6, 1, 12, 0)) == "2024-06-01"
    assert validate_date(None, default=date(2024, 1, 2)) == "2024-01-02"
    with pytest.raises(ValidationError):
        validate_date("  ")
    with pytest.raises(ValidationError):
        validate_date("2024-13-01")


def test_parse_amount_rounds_before_checking_sign():
    assert parse_amount("0.005") == Decimal("0.01")
    assert parse_amount("0.01") == Decimal("0.01")


@pytest.mark.parametrize("raw", ["1e30", "9" * 40])
def test_parse_amount_rejects_amounts_too_large_to_round(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)
