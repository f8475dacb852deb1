"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

__all__ = ["Expense", "isoformat_date", "parse_iso_date"]

ISO_DATE_LENGTH = 10


def isoformat_date(value: date) -> str:
    """Return the calendar date as ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` strings, tolerating a trailing time component."""
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        if len(value) <= ISO_DATE_LENGTH:
            raise
    # Older rows may carry a full timestamp; only the calendar part matters.
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


@dataclass(frozen=True)
class Expense:
    id: int
    amount: Decimal
    category: str
    date: str
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "amount": f"{self.amount:.2f}",
            "category": self.category,
            "note": self.note,
            "date": self.date,
        }

    @classmethod
    def from_row(cls, row: Any) -> "Expense":
        """Hydrate an Expense from a persisted ``expenses`` row."""
        return cls(
            id=row.id,
            # REAL columns come back as floats; str() keeps the short repr.
            amount=Decimal(str(row.amount)),
            category=row.category,
            note=row.note,
            date=row.date,
        )

    def parsed_date(self) -> Optional[date]:
        """Return the calendar date, or None when the stored text is malformed."""
        try:
            return parse_iso_date(self.date)
        except (TypeError, ValueError, AttributeError):
            return None
