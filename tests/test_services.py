from decimal import Decimal

import pytest

from expense_core.exceptions import ValidationError
from expense_core.filters import WindowFilter

from .conftest import TODAY


def test_add_persists_normalised_fields(service):
    expense = service.add({"amount": "12.5", "category": "  Food ", "note": "  ", "date": None})

    assert expense.amount == Decimal("12.50")
    assert expense.category == "Food"
    assert expense.note is None
    assert expense.date == TODAY.isoformat()
    assert service.list() == [expense]


def test_add_keeps_explicit_date(service):
    expense = service.add({"amount": 3, "category": "Books", "note": "novel", "date": "2024-05-01"})

    assert service.get(expense.id).date == "2024-05-01"
    assert service.get(expense.id).note == "novel"


@pytest.mark.parametrize(
    "payload",
    [
        {"amount": "0", "category": "Food"},
        {"amount": "-5", "category": "Food"},
        {"amount": "abc", "category": "Food"},
        {"amount": "", "category": "Food"},
        {"amount": "10", "category": "   "},
        {"amount": "10", "category": None},
    ],
)
def test_add_rejects_invalid_input_without_touching_store(service, payload):
    service.add({"amount": "1", "category": "Seed"})

    with pytest.raises(ValidationError):
        service.add(payload)

    assert service.count() == 1


def test_update_validates_date(service):
    expense = service.add({"amount": "1", "category": "Food"})

    with pytest.raises(ValidationError):
        service.update(expense.id, {"amount": "2", "category": "Food", "date": ""})
    with pytest.raises(ValidationError):
        service.update(expense.id, {"amount": "2", "category": "Food", "date": "15/06/2024"})

    assert service.get(expense.id).amount == Decimal("1")


def test_update_and_delete_unknown_ids_are_silent(service):
    payload = {"amount": "2", "category": "Food", "date": "2024-06-01"}

    assert service.update(404, payload) is False
    assert service.delete(404) is False


def test_update_replaces_all_fields(service):
    expense = service.add({"amount": "1", "category": "Food", "note": "old"})

    assert service.update(
        expense.id, {"amount": "7.10", "category": "Travel", "note": "", "date": "2024-06-03"}
    )

    updated = service.get(expense.id)
    assert (updated.amount, updated.category, updated.note, updated.date) == (
        Decimal("7.1"),
        "Travel",
        None,
        "2024-06-03",
    )


def test_summary_reflects_window(service):
    service.add({"amount": "10", "category": "Food", "date": "2024-06-14"})
    service.add({"amount": "4", "category": "Books", "date": "2024-06-02"})
    service.add({"amount": "6", "category": "Food", "date": "2024-05-20"})

    month = service.summary(WindowFilter.MONTH)
    assert month.total == Decimal("14")
    assert month.by_category == {"Food": Decimal("10"), "Books": Decimal("4")}
    assert month.label == "This Month"

    week = service.summary(WindowFilter.WEEK)
    assert [record.date for record in week.records] == ["2024-06-14"]

    everything = service.summary(WindowFilter.ALL)
    assert everything.total == Decimal("20")
    assert everything.chart.max_amount == Decimal("16")


@pytest.mark.parametrize("amount", ["0.001", "0.004", "1e30"])
def test_add_rejects_amounts_that_cannot_be_stored_positive(service, amount):
    with pytest.raises(ValidationError):
        service.add({"amount": amount, "category": "Food"})

    assert service.count() == 0


def test_long_category_and_note_are_accepted(service):
    expense = service.add({"amount": "5", "category": "C" * 60, "note": "n" * 300})

    stored = service.get(expense.id)
    assert stored.category == "C" * 60
    assert stored.note == "n" * 300
    assert service.count() == 1

    assert service.update(
        expense.id, {"amount": "5", "category": "D" * 80, "date": "2024-06-01"}
    )
    assert service.get(expense.id).category == "D" * 80


def test_update_rejects_oversized_amount(service):
    expense = service.add({"amount": "1", "category": "Food"})

    with pytest.raises(ValidationError):
        service.update(expense.id, {"amount": "1e30", "category": "Food", "date": "2024-06-01"})

    assert service.get(expense.id).amount == Decimal("1")
