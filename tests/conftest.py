from datetime import date

import pytest

from expense_core.services import ExpenseService
from expense_core.storage import ExpenseStore

TODAY = date(2024, 6, 15)


@pytest.fixture
def store(tmp_path):
    store = ExpenseStore(f"sqlite:///{tmp_path / 'expenses.db'}")
    store.create_table()
    yield store
    store.close()


@pytest.fixture
def service(store):
    return ExpenseService(store, today=lambda: TODAY)
