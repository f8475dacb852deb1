"""Validation helpers shared across expense tracker services."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import ValidationError
from .models import isoformat_date, parse_iso_date


def _quantize_two_decimals(amount: Decimal, field: str) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    try:
        return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} is too large") from exc


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits.

    Positivity is checked on the rounded value, so ``0.004`` is rejected
    rather than stored as zero.
    """
    if isinstance(raw, str):
        raw = raw.replace(",", "").strip()
    if raw is None or raw == "" or isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, TypeError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a numeric value")

    rounded = _quantize_two_decimals(amount, field)
    if rounded <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return rounded


def validate_required_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    return trimmed


def validate_optional_str(value: object, field: str) -> Optional[str]:
    """Like :func:`validate_required_str` but blank input collapses to None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return validate_required_str(value, field)


def validate_date(value: object, field: str = "date", *, default: Optional[date] = None) -> str:
    """Normalise a date or ISO string to ``YYYY-MM-DD``.

    Missing values fall back to ``default`` when one is given.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValidationError(f"{field} is required (YYYY-MM-DD)")
        return isoformat_date(default)
    if isinstance(value, date):
        return isoformat_date(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a date or ISO 8601 string")
    try:
        return isoformat_date(parse_iso_date(value))
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid date (YYYY-MM-DD)") from exc
