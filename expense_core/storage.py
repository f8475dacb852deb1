"""Persistence layer for expense records backed by a local SQLite database."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import ExpenseRow, init_db, make_engine, make_session_factory
from .exceptions import PersistenceError, RecordNotFoundError
from .models import Expense

logger = logging.getLogger(__name__)


class ExpenseStore:
    """Single-table store: create, read-all, update and delete expense rows.

    Every public method runs in its own short-lived session and touches at
    most one row. Callers validate input before it gets here.
    """

    def __init__(self, database_url: str, *, engine: Optional[Engine] = None) -> None:
        self._engine = engine if engine is not None else make_engine(database_url)
        self._session_factory = make_session_factory(self._engine)
        self._initialised = False

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_table(self) -> None:
        """Initialise the schema once; later calls are no-ops."""
        if self._initialised:
            return
        try:
            init_db(self._engine)
        except SQLAlchemyError as exc:
            logger.error("Schema initialisation failed: %s", exc)
            raise PersistenceError("Unable to initialise the expenses table") from exc
        self._initialised = True

    def add(self, amount: Decimal, category: str, note: Optional[str], date: str) -> int:
        row = ExpenseRow(amount=float(amount), category=category, note=note, date=date)
        with self._session("add expense") as session:
            session.add(row)
            session.flush()
            expense_id = row.id
        logger.debug("Inserted expense %s (%s, %s)", expense_id, category, date)
        return expense_id

    def list_all(self) -> List[Expense]:
        """Return every expense, most recent date first, newest id breaking ties."""
        query = select(ExpenseRow).order_by(ExpenseRow.date.desc(), ExpenseRow.id.desc())
        with self._session("list expenses") as session:
            rows = session.execute(query).scalars().all()
            return [Expense.from_row(row) for row in rows]

    def get(self, expense_id: int) -> Expense:
        with self._session("load expense") as session:
            row = session.get(ExpenseRow, expense_id)
            if row is None:
                raise RecordNotFoundError(f"Expense {expense_id} not found")
            return Expense.from_row(row)

    def update(
        self, expense_id: int, amount: Decimal, category: str, note: Optional[str], date: str
    ) -> bool:
        """Replace the mutable fields; returns False when no row has that id."""
        statement = (
            update(ExpenseRow)
            .where(ExpenseRow.id == expense_id)
            .values(amount=float(amount), category=category, note=note, date=date)
        )
        with self._session("update expense") as session:
            affected = session.execute(statement).rowcount
        if not affected:
            logger.debug("Update skipped, expense %s does not exist", expense_id)
        return bool(affected)

    def delete(self, expense_id: int) -> bool:
        """Remove the row; deleting an unknown id is a no-op."""
        statement = delete(ExpenseRow).where(ExpenseRow.id == expense_id)
        with self._session("delete expense") as session:
            affected = session.execute(statement).rowcount
        if not affected:
            logger.debug("Delete skipped, expense %s does not exist", expense_id)
        return bool(affected)

    def count(self) -> int:
        with self._session("count expenses") as session:
            return session.execute(select(func.count(ExpenseRow.id))).scalar_one()

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        self.create_table()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise PersistenceError(f"Unable to {action}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
