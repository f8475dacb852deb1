from decimal import Decimal

import pytest
from sqlalchemy import inspect

from expense_core.exceptions import PersistenceError, RecordNotFoundError
from expense_core.storage import ExpenseStore


def test_create_table_is_idempotent(tmp_path):
    store = ExpenseStore(f"sqlite:///{tmp_path / 'fresh.db'}")
    store.create_table()
    store.create_table()
    store.add(Decimal("1.00"), "Food", None, "2024-01-01")

    # A second store on the same file must not wipe existing rows.
    other = ExpenseStore(f"sqlite:///{tmp_path / 'fresh.db'}")
    other.create_table()
    assert other.count() == 1

    columns = {column["name"]: column for column in inspect(store.engine).get_columns("expenses")}
    assert set(columns) == {"id", "amount", "category", "note", "date"}
    assert columns["note"]["nullable"] is True
    assert columns["amount"]["nullable"] is False
    store.close()
    other.close()


def test_add_returns_fresh_ids(store):
    first = store.add(Decimal("10.00"), "Food", "lunch", "2024-01-01")
    second = store.add(Decimal("5.50"), "Books", None, "2024-01-01")

    assert second > first
    records = {record.id: record for record in store.list_all()}
    assert records[first].amount == Decimal("10.0")
    assert records[first].note == "lunch"
    assert records[second].note is None
    assert records[second].category == "Books"


def test_ids_are_not_reused_after_delete(store):
    first = store.add(Decimal("1.00"), "Food", None, "2024-01-01")
    store.delete(first)
    second = store.add(Decimal("1.00"), "Food", None, "2024-01-01")

    assert second > first


def test_list_all_orders_by_date_then_id_descending(store):
    older = store.add(Decimal("1.00"), "Food", None, "2024-01-01")
    newer = store.add(Decimal("2.00"), "Food", None, "2024-01-02")
    same_day = store.add(Decimal("3.00"), "Rent", None, "2024-01-01")

    assert [record.id for record in store.list_all()] == [newer, same_day, older]


def test_update_replaces_mutable_fields(store):
    target = store.add(Decimal("1.00"), "Food", "old", "2024-01-01")
    other = store.add(Decimal("9.00"), "Rent", None, "2024-01-03")

    assert store.update(target, Decimal("4.25"), "Books", None, "2024-02-02") is True

    updated = store.get(target)
    assert updated.amount == Decimal("4.25")
    assert updated.category == "Books"
    assert updated.note is None
    assert updated.date == "2024-02-02"
    assert store.get(other).category == "Rent"


def test_update_missing_id_is_noop(store):
    store.add(Decimal("1.00"), "Food", None, "2024-01-01")

    assert store.update(999, Decimal("2.00"), "Books", None, "2024-01-01") is False
    assert [record.category for record in store.list_all()] == ["Food"]


def test_delete_is_idempotent(store):
    target = store.add(Decimal("1.00"), "Food", None, "2024-01-01")

    assert store.delete(target) is True
    assert store.delete(target) is False
    assert store.list_all() == []


def test_get_missing_raises(store):
    with pytest.raises(RecordNotFoundError):
        store.get(42)


def test_unreachable_database_raises_persistence_error(tmp_path):
    store = ExpenseStore(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'expenses.db'}")

    with pytest.raises(PersistenceError):
        store.create_table()
    store.close()
