import json
from datetime import date
from decimal import Decimal

from expense_core.models import Expense


def test_to_dict_is_json_friendly():
    expense = Expense(id=3, amount=Decimal("4.5"), category="Food", note=None, date="2024-06-01")

    data = expense.to_dict()

    assert data == {
        "id": 3,
        "amount": "4.50",
        "category": "Food",
        "note": None,
        "date": "2024-06-01",
    }
    assert json.loads(json.dumps(data)) == data


def test_parsed_date():
    assert Expense(id=1, amount=Decimal("1"), category="Food", date="2024-06-01").parsed_date() == date(2024, 6, 1)
    assert Expense(id=1, amount=Decimal("1"), category="Food", date="June").parsed_date() is None
