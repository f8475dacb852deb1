"""Date-window filtering and category aggregation over in-memory expenses.

Everything here is pure: the same ``(records, mode, today)`` always yields
the same result, so the screen can recompute on every refresh.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Expense

__all__ = [
    "BAR_SCALE",
    "UNCATEGORIZED",
    "WEEK_STARTS_ON",
    "ChartSeries",
    "SpendingSummary",
    "WindowFilter",
    "chart_series",
    "filter_by_window",
    "start_of_week",
    "summarize",
    "total_spending",
    "totals_by_category",
]

UNCATEGORIZED = "Uncategorized"
BAR_SCALE = 120
# Day index 0 is Sunday; weeks run Sunday..Saturday regardless of locale.
WEEK_STARTS_ON = 0

ZERO = Decimal("0")


class WindowFilter(str, enum.Enum):
    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def heading(self) -> str:
        """Text used in the totals and chart titles."""
        return _HEADINGS[self]


_LABELS = {
    WindowFilter.ALL: "All",
    WindowFilter.WEEK: "This Week",
    WindowFilter.MONTH: "This Month",
}

_HEADINGS = {**_LABELS, WindowFilter.ALL: "ALL"}


def _sunday_index(day: date) -> int:
    # date.weekday() counts from Monday; shift so Sunday becomes 0.
    return (day.weekday() + 1) % 7


def start_of_week(today: date) -> date:
    offset = (_sunday_index(today) - WEEK_STARTS_ON) % 7
    return today - timedelta(days=offset)


def _in_current_week(day: Optional[date], today: date) -> bool:
    if day is None:
        return False
    start = start_of_week(today)
    return start <= day < start + timedelta(days=7)


def _in_current_month(day: Optional[date], today: date) -> bool:
    if day is None:
        return False
    return day.year == today.year and day.month == today.month


def filter_by_window(
    records: Iterable[Expense], mode: WindowFilter, today: Optional[date] = None
) -> List[Expense]:
    """Keep the records whose date falls in the window; order is preserved.

    Records with an unparseable date are kept under ``ALL`` and dropped by
    the week and month windows.
    """
    mode = WindowFilter(mode)
    if mode is WindowFilter.ALL:
        return list(records)

    today = today or date.today()
    if mode is WindowFilter.WEEK:
        return [record for record in records if _in_current_week(record.parsed_date(), today)]
    return [record for record in records if _in_current_month(record.parsed_date(), today)]


def _amount_of(record: Expense) -> Decimal:
    raw = getattr(record, "amount", None)
    if raw is None or raw == "":
        return ZERO
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def total_spending(records: Iterable[Expense]) -> Decimal:
    return sum((_amount_of(record) for record in records), start=ZERO)


def totals_by_category(records: Iterable[Expense]) -> Dict[str, Decimal]:
    """Sum amounts per category, keyed in order of first appearance."""
    totals: Dict[str, Decimal] = {}
    for record in records:
        category = (getattr(record, "category", None) or "").strip() or UNCATEGORIZED
        totals[category] = totals.get(category, ZERO) + _amount_of(record)
    return totals


@dataclass(frozen=True)
class ChartSeries:
    bars: Tuple[Tuple[str, Decimal], ...] = ()
    max_amount: Decimal = ZERO
    scale: int = BAR_SCALE

    def bar_height(self, amount: Decimal) -> float:
        if self.max_amount <= 0:
            return 0.0
        return float(amount / self.max_amount * self.scale)

    def heights(self) -> List[Tuple[str, Decimal, float]]:
        return [(category, amount, self.bar_height(amount)) for category, amount in self.bars]

    def __len__(self) -> int:
        return len(self.bars)


def chart_series(totals: Dict[str, Decimal], scale: int = BAR_SCALE) -> ChartSeries:
    bars = tuple(totals.items())
    max_amount = max((amount for _, amount in bars), default=ZERO)
    return ChartSeries(bars=bars, max_amount=max_amount, scale=scale)


@dataclass(frozen=True)
class SpendingSummary:
    """Derived view of the record set for one window filter."""

    mode: WindowFilter
    records: Sequence[Expense] = field(default_factory=tuple)
    total: Decimal = ZERO
    by_category: Dict[str, Decimal] = field(default_factory=dict)
    chart: ChartSeries = field(default_factory=ChartSeries)

    @property
    def label(self) -> str:
        return self.mode.heading


def summarize(
    records: Iterable[Expense], mode: WindowFilter, today: Optional[date] = None
) -> SpendingSummary:
    filtered = filter_by_window(records, mode, today)
    by_category = totals_by_category(filtered)
    return SpendingSummary(
        mode=WindowFilter(mode),
        records=tuple(filtered),
        total=total_spending(filtered),
        by_category=by_category,
        chart=chart_series(by_category),
    )
