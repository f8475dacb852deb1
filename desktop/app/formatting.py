"""Display helpers for the desktop screen that do not depend on Tk."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, List, Optional

from expense_core.models import Expense, ISO_DATE_LENGTH


def sanitize_amount_input(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    cleaned = raw.replace(",", "").replace("$", "").strip()
    return cleaned


def format_amount_display(value: Decimal | str) -> str:
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    sanitized = sanitize_amount_input(value)
    if not sanitized:
        return ""
    try:
        amount = Decimal(sanitized)
    except InvalidOperation:
        return value.strip()
    return f"{amount:,.2f}"


def format_currency(value: Decimal) -> str:
    return f"${value:.2f}"


def format_bar_value(value: Decimal) -> str:
    """Bar captions show whole currency units."""
    return f"${value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)}"


def edit_date_text(expense: Expense) -> str:
    """Prefill for the edit form: the calendar part of the stored date."""
    if expense.date and len(expense.date) >= ISO_DATE_LENGTH:
        return expense.date[:ISO_DATE_LENGTH]
    return ""


def edit_form_values(expense: Expense) -> Dict[str, str]:
    return {
        "amount": f"{expense.amount}",
        "category": expense.category,
        "note": expense.note or "",
        "date": edit_date_text(expense),
    }


def category_lines(by_category: Dict[str, Decimal]) -> List[str]:
    return [f"• {category}: {format_currency(amount)}" for category, amount in by_category.items()]


def truncate_label(text: str, limit: int = 8) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def edit_form_errors(values: Dict[str, str]) -> List[str]:
    """Messages for the edit dialog's blocking alert; empty when the form is usable."""
    errors: List[str] = []

    amount_text = sanitize_amount_input(values.get("amount"))
    try:
        amount = Decimal(amount_text)
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite() or amount <= 0:
        errors.append("Please enter a valid positive amount.")

    if not (values.get("category") or "").strip():
        errors.append("Category is required.")

    if not (values.get("date") or "").strip():
        errors.append("Date is required (YYYY-MM-DD).")

    return errors
