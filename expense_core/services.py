"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from .exceptions import PersistenceError
from .filters import SpendingSummary, WindowFilter, summarize
from .models import Expense
from .storage import ExpenseStore
from .validators import (
    parse_amount,
    validate_date,
    validate_optional_str,
    validate_required_str,
)

logger = logging.getLogger(__name__)


class ExpenseService:
    """Validates expense input and mediates persistence."""

    def __init__(self, store: ExpenseStore, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today
        self._store.create_table()

    # Public API -----------------------------------------------------------
    def add(self, payload: Dict[str, object]) -> Expense:
        """Validate and persist a new expense; the date defaults to today."""
        data = self._validate_payload(payload, default_date=self._today())
        expense_id = self._store.add(**data)
        logger.info("Added expense %s: %s %s", expense_id, data["amount"], data["category"])
        return Expense(id=expense_id, **data)

    def update(self, expense_id: int, payload: Dict[str, object]) -> bool:
        """Replace every mutable field. Unknown ids are ignored and return False."""
        data = self._validate_payload(payload)
        updated = self._store.update(expense_id, **data)
        if updated:
            logger.info("Updated expense %s", expense_id)
        return updated

    def delete(self, expense_id: int) -> bool:
        deleted = self._store.delete(expense_id)
        if deleted:
            logger.info("Deleted expense %s", expense_id)
        return deleted

    def get(self, expense_id: int) -> Expense:
        """Return an expense or raise if it does not exist."""
        return self._store.get(expense_id)

    def list(self) -> List[Expense]:
        return self._store.list_all()

    def count(self) -> int:
        return self._store.count()

    def summary(self, mode: WindowFilter, today: Optional[date] = None) -> SpendingSummary:
        """Reload all records and derive totals and chart data for ``mode``."""
        return summarize(self.list(), mode, today or self._today())

    def close(self) -> None:
        self._store.close()

    # Internal helpers -----------------------------------------------------
    def _validate_payload(
        self, payload: Dict[str, object], *, default_date: Optional[date] = None
    ) -> Dict[str, object]:
        return {
            "amount": parse_amount(payload.get("amount"), "amount"),
            "category": validate_required_str(payload.get("category"), "category"),
            "note": validate_optional_str(payload.get("note"), "note"),
            "date": validate_date(payload.get("date"), "date", default=default_date),
        }


def open_service(database_url: str) -> ExpenseService:
    """Build a service on a fresh store, creating the schema if needed."""
    store = ExpenseStore(database_url)
    try:
        return ExpenseService(store)
    except PersistenceError:
        store.close()
        raise
